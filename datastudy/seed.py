"""초기 데이터 시드 스크립트 — 샘플 회원 생성.

Seed script — Creates the sample members used by the paging endpoint.

Usage:
    python -m datastudy.seed

Creates:
    - SEED_MEMBER_COUNT명의 회원: user0 ~ user{N-1}, 나이 = 인덱스
"""

import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.config import settings
from datastudy.database import async_session, engine, init_models
from datastudy.models import Member


async def seed_members(db: AsyncSession, count: int) -> int:
    """회원 테이블이 비어 있을 때만 샘플 회원을 추가합니다.

    Insert ``count`` sample members when the member table is empty.

    Returns:
        int: 추가된 회원 수, 이미 시드된 경우 0 (Inserted rows, 0 if already seeded)
    """
    existing: int = (await db.execute(select(func.count()).select_from(Member))).scalar() or 0
    if existing:
        return 0

    db.add_all(Member(f"user{i}", i) for i in range(count))
    await db.flush()
    return count


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create tables if needed and insert the sample members. Idempotent.
    """
    await init_models()

    async with async_session() as db:
        inserted: int = await seed_members(db, settings.SEED_MEMBER_COUNT)
        await db.commit()

    if inserted:
        print(f"Seeded {inserted} members.")
    else:
        print("Already seeded. Skipping.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
