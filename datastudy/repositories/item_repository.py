"""아이템 레포지토리 — 직접 할당한 ID를 가진 엔티티의 저장.

Item Repository. Items carry application-assigned ids, so ``save`` relies
on ``Item.is_new`` (created_date unset) to INSERT instead of merging.
"""

from datastudy.models.item import Item
from datastudy.repositories.base import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """아이템 테이블에 대한 레포지토리 — Repository for the item table."""

    def __init__(self) -> None:
        super().__init__(Item)


# 싱글턴 인스턴스 — Singleton instance
item_repository: ItemRepository = ItemRepository()
