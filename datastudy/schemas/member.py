"""회원 관련 Pydantic 프로젝션/요청/응답 스키마 정의.

Member Pydantic projection, request and response schema definitions.
Projections are read-only views over member rows; they are never persisted.
"""

from pydantic import BaseModel, ConfigDict, Field


# === 프로젝션 (Projections) ===

class MemberDto(BaseModel):
    """회원 DTO — 팀 이름을 포함한 조회 결과.

    Member DTO built from a constructor expression over member join team.

    Attributes:
        id: 회원 식별자 (Member id)
        username: 회원 이름 (Username)
        team_name: 팀 이름 (Team name, None when not resolved)
    """

    model_config = ConfigDict(frozen=True)

    id: int  # 회원 식별자 (Member id)
    username: str | None  # 회원 이름 (Username)
    team_name: str | None = None  # 팀 이름 (Team name)


class UsernameOnly(BaseModel):
    """이름만 조회하는 닫힌 프로젝션 — Closed projection selecting only username."""

    model_config = ConfigDict(frozen=True)

    username: str | None


class UsernameOnlyDto(BaseModel):
    """클래스 기반 프로젝션 — 필드 이름으로 조회 컬럼을 결정.

    Class-based projection; the field names decide the selected columns.
    """

    model_config = ConfigDict(frozen=True)

    username: str | None


class TeamInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None


class NestedClosedProjections(BaseModel):
    """중첩 닫힌 프로젝션.

    Nested closed projection. The root column is selected directly; the
    nested team is reached through a LEFT OUTER JOIN, so members without
    a team yield ``team=None``.
    """

    model_config = ConfigDict(frozen=True)

    username: str | None
    team: TeamInfo | None = None


class MemberProjection(BaseModel):
    """네이티브 쿼리 결과 프로젝션 — Native query row projection."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str | None
    team_name: str | None = None


# === 요청/응답 (Request / Response) ===

class MemberCreate(BaseModel):
    """회원 생성 요청 스키마.

    Member creation request schema.

    Attributes:
        username: 회원 이름 (Username)
        age: 나이 (Age, non-negative)
        team_id: 소속 팀 ID (Team id, optional)
    """

    username: str = Field(..., min_length=1)  # 회원 이름 (Username)
    age: int = Field(0, ge=0)  # 나이 (Age)
    team_id: int | None = None  # 소속 팀 — None이면 팀 없음 (Team, optional)


class MemberUsernameResponse(BaseModel):
    """회원 이름 응답 스키마 — Username-only response."""

    username: str | None
