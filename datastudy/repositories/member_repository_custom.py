"""회원 레포지토리 사용자 정의 구현 조각.

Custom member repository fragment.
Queries too specific for the declarative style are written directly
against the session here and mixed into MemberRepository.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.models.member import Member


class MemberRepositoryCustom:
    """회원 레포지토리 사용자 정의 조각 — Custom fragment mixed into MemberRepository."""

    async def find_member_custom(self, db: AsyncSession) -> Sequence[Member]:
        """세션으로 직접 작성한 전체 회원 조회.

        Retrieve all members with a hand-written session query.
        """
        result = await db.execute(select(Member))
        return result.scalars().all()
