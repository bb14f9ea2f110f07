"""커스텀 예외 클래스 모듈.

Custom exception classes module.
Domain errors raised by the repository/paging layer, and pre-configured
HTTPException subclasses raised by services so routers never pick
status codes themselves. SQLAlchemy errors are not wrapped.

Usage:
    from datastudy.utils.exceptions import NotFoundError, EntityNotFoundError
    raise EntityNotFoundError(Member, 1)
    raise NotFoundError("Member not found")
"""

from typing import Any

from fastapi import HTTPException, status


# === 도메인 예외 (Domain errors) ===

class EntityNotFoundError(LookupError):
    """ID로 엔티티를 찾을 수 없을 때 — Entity lookup by id found nothing.

    Args:
        model: 엔티티 클래스 (Entity class)
        record_id: 조회한 식별자 (Identifier looked up)
    """

    def __init__(self, model: type, record_id: Any) -> None:
        self.model = model
        self.record_id = record_id
        super().__init__(f"{model.__name__} entity with id {record_id!r} does not exist")


class InvalidSortPropertyError(ValueError):
    """정렬 속성이 엔티티에 없을 때 — Sort property is not a mapped column.

    Args:
        model: 엔티티 클래스 (Entity class)
        prop: 요청된 정렬 속성 (Requested sort property)
    """

    def __init__(self, model: type, prop: str) -> None:
        self.model = model
        self.prop = prop
        super().__init__(f"No property {prop!r} found for type {model.__name__}")


# === HTTP 예외 (HTTP errors) ===

class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (member, team) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request is invalid beyond what Pydantic validation
    catches (e.g. sorting by an unknown property).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
