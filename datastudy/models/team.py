"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.

Tables:
    - team: 팀 (Team, reverse side of member.team_id)
"""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datastudy.database import Base
from datastudy.models.base import BaseEntity


class Team(BaseEntity, Base):
    """팀 모델 — 회원 컬렉션을 가진 연관관계의 반대편.

    Team model — inverse side of the Member.team association.
    The foreign key lives on member.team_id; this side only mirrors it.

    Attributes:
        id: 팀 식별자 (Surrogate key, column team_id)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 회원 목록 (Members mapped by Member.team)
    """

    __tablename__ = "team"

    id: Mapped[int] = mapped_column(
        "team_id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    members = relationship("Member", back_populates="team")

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name})"
