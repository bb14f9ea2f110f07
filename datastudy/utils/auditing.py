"""감사자(Auditor) 컨텍스트 모듈.

Auditor context module.
Holds the actor recorded in created_by/last_modified_by for the current
task. The HTTP layer scopes it per request; outside a request the
configured default auditor applies.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from datastudy.config import settings

_current_auditor: ContextVar[str | None] = ContextVar("current_auditor", default=None)


def get_current_auditor() -> str:
    """현재 감사자를 반환합니다. 미설정 시 기본 감사자.

    Return the current auditor, falling back to settings.DEFAULT_AUDITOR.
    """
    return _current_auditor.get() or settings.DEFAULT_AUDITOR


@contextmanager
def set_current_auditor(auditor: str | None) -> Iterator[None]:
    """블록 범위 안에서 감사자를 설정합니다.

    Scope the current auditor to a ``with`` block.

    Usage:
        with set_current_auditor("admin"):
            await member_repository.save(db, member)
    """
    token = _current_auditor.set(auditor)
    try:
        yield
    finally:
        _current_auditor.reset(token)
