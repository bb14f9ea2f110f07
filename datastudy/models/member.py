"""회원 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.
Registers the Member named query and named entity graph next to the mapping.

Tables:
    - member: 회원 (Member, many-to-one to team)
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, bindparam, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datastudy.database import Base
from datastudy.models.base import BaseEntity
from datastudy.models.registry import named_entity_graph, named_query
from datastudy.models.team import Team


class Member(BaseEntity, Base):
    """회원 모델.

    Member model. ``team`` is loaded lazily; under asyncio it must be
    loaded explicitly (``await member.awaitable_attrs.team``) or eagerly
    via fetch join / entity graph.

    Attributes:
        id: 회원 식별자 (Surrogate key, column member_id)
        username: 회원 이름 (Username, mutable)
        age: 나이 (Age, mutable)
        team_id: 소속 팀 FK (Team foreign key, nullable)

    Relationships:
        team: 소속 팀 (Owning side of the Team.members association)
    """

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(
        "member_id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True
    )
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    team_id: Mapped[int | None] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        ForeignKey("team.team_id"),
        nullable=True,
        index=True,
    )

    # 지연 로딩 — Lazy many-to-one (LAZY fetch)
    team = relationship("Team", back_populates="members", lazy="select")

    def __init__(self, username: str | None = None, age: int = 0, team: Team | None = None) -> None:
        self.username = username
        self.age = age
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """소속 팀을 변경합니다. 양쪽 연관관계를 함께 맞춥니다.

        Move the member to another team, keeping both sides consistent:
        assigning ``team`` appends this member to ``team.members`` through
        back_populates, without loading an unloaded collection.
        """
        self.team = team

    def change_username(self, username: str) -> None:
        self.username = username

    def __repr__(self) -> str:
        return f"Member(id={self.id}, username={self.username}, age={self.age})"


# 명명 쿼리 — 시작 시점에 컴파일하여 오류를 조기에 발견
named_query(
    "Member.findByUsername",
    lambda: select(Member).where(Member.username == bindparam("username")),
)

# 명명 엔티티 그래프 — team을 함께 조회
named_entity_graph("Member.all", Member.team)
