"""애플리케이션 환경 설정 모듈.

Application configuration module using pydantic-settings.
All settings can be overridden via environment variables or a .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings

# .env 파일 절대 경로 — CWD와 무관하게 항상 프로젝트 루트의 .env를 참조
# Absolute path to .env file — ensures correct loading regardless of CWD
_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """애플리케이션 전역 설정 — 환경 변수 기반 구성.

    Global application settings loaded from environment variables.

    Attributes:
        DATABASE_URL: 비동기 DB 연결 문자열 (Async database connection string)
        APP_NAME: 애플리케이션 표시 이름 (Application display name)
        DEBUG: 디버그 모드 플래그 (Debug mode flag, enables SQL echo)
        DEFAULT_AUDITOR: 기본 감사자 (Fallback value for created_by/last_modified_by)
        SEED_MEMBER_COUNT: 시드 회원 수 (Number of members inserted by the seed script)
        DEFAULT_PAGE_SIZE: 기본 페이지 크기 (Default web page size)
        MAX_PAGE_SIZE: 최대 페이지 크기 (Upper bound for web page size)
    """

    # 데이터베이스 — 로컬은 SQLite(aiosqlite), 운영은 PostgreSQL(asyncpg)
    DATABASE_URL: str = "sqlite+aiosqlite:///./datastudy.db"

    APP_NAME: str = "DataStudy API"
    DEBUG: bool = False  # True이면 SQLAlchemy SQL 로그 출력 (Enables SQL echo when True)

    # 감사(Auditing) 설정 — 요청 헤더가 없을 때 사용할 작성자
    DEFAULT_AUDITOR: str = "system"

    SEED_MEMBER_COUNT: int = 100

    # 웹 페이징 설정 — Web paging defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 2000

    # Axiom 로깅 설정 — Axiom observability platform settings
    AXIOM_API_TOKEN: str = ""  # Axiom API 토큰 (API token from Axiom dashboard)
    AXIOM_DATASET: str = ""  # Axiom 데이터셋 이름 (Dataset name for API logs)

    model_config = {"env_file": _ENV_FILE, "env_file_encoding": "utf-8"}


# 전역 설정 싱글턴 인스턴스 — Global settings singleton instance
settings: Settings = Settings()
