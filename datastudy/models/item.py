"""아이템 SQLAlchemy ORM 모델 정의.

Item SQLAlchemy ORM model definition.
The primary key is assigned by the application, so "key is None" cannot
tell a new Item from a stored one. ``is_new`` looks at created_date instead,
which only the insert listener ever sets.

Tables:
    - item: 아이템 (Item with application-assigned string id)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from datastudy.database import Base
from datastudy.models.base import CreatedDateMixin


class Item(CreatedDateMixin, Base):
    """아이템 모델 — 직접 할당한 ID를 사용하는 엔티티.

    Item model with an application-assigned identifier.

    Attributes:
        id: 직접 할당한 문자열 ID (Application-assigned string id)
        created_date: 생성 일시 (Set on first insert)
    """

    __tablename__ = "item"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    def __init__(self, id: str) -> None:
        self.id = id

    @property
    def is_new(self) -> bool:
        """아직 저장되지 않은 엔티티인지 여부 — created_date가 없으면 신규."""
        return self.created_date is None

    def __repr__(self) -> str:
        return f"Item(id={self.id}, created_date={self.created_date})"
