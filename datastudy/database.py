"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
PostgreSQL (asyncpg) is used in production, SQLite (aiosqlite) locally.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from datastudy.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """드라이버에 맞는 옵션으로 비동기 엔진을 생성합니다.

    Create an async engine with options suited to the target driver.
    Connection pool sizing only applies to server databases; SQLite keeps
    SQLAlchemy's default pool.

    Args:
        url: 비동기 DB 연결 문자열 (Async database URL)
        echo: SQL 로그 출력 여부 (Whether to echo SQL statements)

    Returns:
        AsyncEngine: 생성된 엔진 (Configured async engine)
    """
    kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    backend: str = make_url(url).get_backend_name()
    if backend != "sqlite":
        kwargs.update(pool_size=5, max_overflow=10)
    if make_url(url).get_driver_name() == "asyncpg":
        # 트랜잭션 모드 풀러에서 prepared statement 비활성화
        kwargs["connect_args"] = {"statement_cache_size": 0}
    return create_async_engine(url, **kwargs)


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(AsyncAttrs, DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM entities.
    AsyncAttrs exposes ``awaitable_attrs`` so lazy relationships can be
    loaded explicitly under asyncio (``await member.awaitable_attrs.team``).
    """

    pass


async def init_models(target: AsyncEngine | None = None) -> None:
    """메타데이터에 등록된 모든 테이블을 생성합니다.

    Create every table registered on the metadata (idempotent).
    """
    import datastudy.models  # noqa: F401 — register all entities with metadata

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.
    The session is automatically closed after the request completes.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
