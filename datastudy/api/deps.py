"""FastAPI 의존성 주입 모듈 — 감사자 및 페이지 요청.

FastAPI dependency injection module.
Scopes the auditor of each request and turns ``page``/``size``/``sort``
query parameters into a PageRequest.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Header, Query

from datastudy.config import settings
from datastudy.utils.auditing import set_current_auditor
from datastudy.utils.exceptions import BadRequestError
from datastudy.utils.pagination import PageRequest, Sort


async def audit_context(
    x_user_id: Annotated[str | None, Header()] = None,
) -> AsyncGenerator[None, None]:
    """X-User-Id 헤더를 요청 범위의 감사자로 설정합니다.

    Use the X-User-Id header as the auditor for this request; without it
    the default auditor applies.
    """
    with set_current_auditor(x_user_id):
        yield


def get_page_request(
    page: Annotated[int, Query(ge=0)] = 0,
    size: Annotated[int | None, Query(ge=1)] = None,
    sort: Annotated[list[str] | None, Query()] = None,
) -> PageRequest:
    """웹 파라미터를 페이지 요청으로 변환합니다.

    Build a PageRequest from ``page`` (zero-based), ``size`` (capped at
    MAX_PAGE_SIZE) and repeatable ``sort=property,direction`` parameters.

    Raises:
        BadRequestError: 정렬 방향이 잘못된 경우 (Invalid sort direction)
    """
    page_size: int = min(size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    try:
        parsed: Sort = Sort.parse(sort or [])
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc
    return PageRequest.of(page, page_size, parsed)
