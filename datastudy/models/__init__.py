"""SQLAlchemy ORM 모델 패키지 — 모든 엔티티의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all entities.
Importing from this package registers every entity with the metadata and
compiles the named queries, so a broken named query fails at startup.

Modules:
    base: 감사 베이스 (Auditing mixins)
    team: 팀 (Team)
    member: 회원 (Member, named query and entity graph)
    item: 아이템 (Item with application-assigned id)
"""

from datastudy.models.base import BaseEntity, BaseTimeEntity, CreatedDateMixin
from datastudy.models.item import Item
from datastudy.models.member import Member
from datastudy.models.registry import validate_named_queries
from datastudy.models.team import Team

validate_named_queries()

__all__ = [
    "BaseEntity", "BaseTimeEntity", "CreatedDateMixin",
    "Member", "Team", "Item",
]
