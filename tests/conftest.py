"""테스트 인프라 — 임시 테스트 DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Temporary database, session, and httpx client fixtures.
TEST_DATABASE_URL selects the database (e.g. a PostgreSQL instance);
by default a SQLite file in a temporary directory is used.
Schema is created once per session, rows are deleted after each test.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from datastudy.database import Base, build_engine, get_db, init_models
from datastudy.main import app
from datastudy.models import Member, Team

_schema_created = False


# ---------------------------------------------------------------------------
# Session-scoped: 테스트 DB 위치
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def database_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """테스트 DB URL — 환경 변수가 없으면 임시 SQLite 파일."""
    url: str | None = os.environ.get("TEST_DATABASE_URL")
    if url:
        return url
    return f"sqlite+aiosqlite:///{tmp_path_factory.mktemp('db') / 'test_datastudy.db'}"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 첫 호출 시 스키마를 생성합니다."""
    global _schema_created
    eng = build_engine(database_url)

    if not _schema_created:
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await init_models(eng)
        _schema_created = True

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        # 커밋되지 않은 변경 처리
        try:
            await session.commit()
        except Exception:
            await session.rollback()

    # 테스트 후 모든 데이터 정리 — 자식 테이블부터 삭제
    async with factory() as cleanup:
        for table in reversed(Base.metadata.sorted_tables):
            await cleanup.execute(table.delete())
        await cleanup.commit()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 영속성 컨텍스트 flush + clear
# ---------------------------------------------------------------------------
async def flush_and_clear(db: AsyncSession) -> None:
    """변경 사항을 DB에 반영한 뒤 영속성 컨텍스트를 비웁니다."""
    await db.flush()
    db.expunge_all()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def team_a(db: AsyncSession) -> Team:
    """teamA 팀을 생성합니다."""
    team = Team("teamA")
    db.add(team)
    await db.flush()
    return team


@pytest_asyncio.fixture
async def m1_m2(db: AsyncSession, team_a: Team) -> tuple[Member, Member]:
    """teamA 소속 회원 m1, m2(나이 0)를 생성하고 컨텍스트를 비웁니다."""
    m1 = Member("m1", 0, team_a)
    m2 = Member("m2", 0, team_a)
    db.add_all([m1, m2])
    await flush_and_clear(db)
    return m1, m2
