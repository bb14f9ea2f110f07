"""팀 레포지토리 — 팀 CRUD.

Team Repository — Plain CRUD for teams.
"""

from datastudy.models.team import Team
from datastudy.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 레포지토리 — Repository for the team table."""

    def __init__(self) -> None:
        super().__init__(Team)


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
