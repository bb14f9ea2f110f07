"""회원 조회 전용 레포지토리 — 화면을 위한 단순 조회 쿼리를 분리.

Member query repository. Screen-oriented read queries are kept apart from
the core MemberRepository so each side can change independently.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.models.member import Member


class MemberQueryRepository:
    """화면 조회용 회원 쿼리 — Read-only member queries for screens."""

    async def find_all_members(self, db: AsyncSession) -> Sequence[Member]:
        result = await db.execute(select(Member))
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
member_query_repository: MemberQueryRepository = MemberQueryRepository()
