"""감사(Auditing) 베이스 엔티티 정의.

Auditing base entity definitions.
Mixins carrying creation/modification timestamps and actors. A mapper
event listener fills the columns on flush; application code never
assigns them directly.

Hierarchy:
    - CreatedDateMixin: created_date
    - BaseTimeEntity: + last_modified_date
    - BaseEntity: + created_by, last_modified_by
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column, object_session

from datastudy.utils.auditing import get_current_auditor


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreatedDateMixin:
    """생성 일시 믹스인 — Creation timestamp mixin."""

    # 생성 일시 — 최초 INSERT 시점에만 설정, 이후 변경 불가 (Set once on insert)
    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class BaseTimeEntity(CreatedDateMixin):
    """생성/수정 일시 믹스인.

    Creation and last-modification timestamp mixin.
    """

    # 수정 일시 — INSERT/UPDATE 시 갱신 (Refreshed on every insert/update)
    last_modified_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class BaseEntity(BaseTimeEntity):
    """생성/수정 일시와 작성자/수정자를 함께 기록하는 믹스인.

    Auditing mixin recording timestamps plus creating/modifying actors.
    """

    # 작성자 — 최초 INSERT 시 감사자 (Auditor at insert time)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 수정자 — 마지막 변경 시 감사자 (Auditor at last modification)
    last_modified_by: Mapped[str | None] = mapped_column(String(255), nullable=True)


@event.listens_for(CreatedDateMixin, "before_insert", propagate=True)
def _audit_before_insert(mapper: Mapper, connection, target: CreatedDateMixin) -> None:
    now: datetime = _utcnow()
    if target.created_date is None:
        target.created_date = now
    if isinstance(target, BaseTimeEntity):
        target.last_modified_date = now
    if isinstance(target, BaseEntity):
        auditor: str = get_current_auditor()
        target.created_by = auditor
        target.last_modified_by = auditor


@event.listens_for(BaseTimeEntity, "before_update", propagate=True)
def _audit_before_update(mapper: Mapper, connection, target: BaseTimeEntity) -> None:
    # 컬렉션만 바뀐 경우(예: team.members.append)는 수정으로 보지 않음
    session = object_session(target)
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    target.last_modified_date = _utcnow()
    if isinstance(target, BaseEntity):
        target.last_modified_by = get_current_auditor()
