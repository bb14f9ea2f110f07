"""예제 기반 조회(Query by Example) 모듈.

Query-by-example module.
A probe entity (transient, never saved) describes the rows to find: every
non-null column becomes an equality (or string-matcher) condition, and a
non-null many-to-one probe becomes an INNER JOIN matched on its own
non-null columns. Outer joins cannot be expressed this way.

Always ignored:
    - 식별자/외래키 컬럼 (Primary key and foreign key columns)
    - 감사 컬럼 (Auditing columns)
    - 일대다 컬렉션 (One-to-many collections)
    - 로딩되지 않은 속성 (Attributes not loaded on the probe; never fetched)

Usage:
    probe = Member("m1")
    probe.change_team(Team("teamA"))
    matcher = ExampleMatcher.matching().with_ignore_paths("age")
    members = await member_repository.find_all_by_example(db, Example.of(probe, matcher))
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from sqlalchemy import ColumnElement, Select, String, and_, func, inspect, or_, select
from sqlalchemy.orm import aliased

T = TypeVar("T")

# 감사 컬럼 — 예제 조건에서 항상 제외 (Auditing columns, never matched)
_AUDIT_FIELDS: frozenset[str] = frozenset(
    {"created_date", "last_modified_date", "created_by", "last_modified_by"}
)


class StringMatcher(str, Enum):
    """문자열 비교 방식 — String comparison mode."""

    EXACT = "exact"
    STARTING = "starting"
    ENDING = "ending"
    CONTAINING = "containing"


class ExampleMatcher(BaseModel):
    """예제 매칭 규칙.

    Matching rules applied to a probe.

    Attributes:
        ignored_paths: 무시할 속성 경로 (Dotted property paths to skip, e.g. "team.name")
        ignore_case_paths: 대소문자 무시 경로 (Paths compared case-insensitively)
        ignore_case_all: 모든 문자열 대소문자 무시 (Ignore case everywhere)
        string_matcher: 문자열 비교 방식 (String comparison mode)
        match_any: OR 결합 여부 (Combine with OR instead of AND)
    """

    model_config = ConfigDict(frozen=True)

    ignored_paths: frozenset[str] = frozenset()
    ignore_case_paths: frozenset[str] = frozenset()
    ignore_case_all: bool = False
    string_matcher: StringMatcher = StringMatcher.EXACT
    match_any: bool = False

    @classmethod
    def matching(cls) -> "ExampleMatcher":
        return cls()

    @classmethod
    def matching_any(cls) -> "ExampleMatcher":
        return cls(match_any=True)

    def with_ignore_paths(self, *paths: str) -> "ExampleMatcher":
        return self.model_copy(update={"ignored_paths": self.ignored_paths | frozenset(paths)})

    def with_ignore_case(self, *paths: str) -> "ExampleMatcher":
        if not paths:
            return self.model_copy(update={"ignore_case_all": True})
        return self.model_copy(update={"ignore_case_paths": self.ignore_case_paths | frozenset(paths)})

    def with_string_matcher(self, string_matcher: StringMatcher) -> "ExampleMatcher":
        return self.model_copy(update={"string_matcher": string_matcher})

    def is_ignored(self, path: str) -> bool:
        return path in self.ignored_paths

    def is_ignore_case(self, path: str) -> bool:
        return self.ignore_case_all or path in self.ignore_case_paths


class Example(Generic[T]):
    """프로브 엔티티와 매칭 규칙의 묶음 — Probe entity plus matcher."""

    def __init__(self, probe: T, matcher: ExampleMatcher | None = None) -> None:
        self.probe: T = probe
        self.matcher: ExampleMatcher = matcher or ExampleMatcher.matching()

    @classmethod
    def of(cls, probe: T, matcher: ExampleMatcher | None = None) -> "Example[T]":
        return cls(probe, matcher)

    @property
    def probe_type(self) -> type[T]:
        return type(self.probe)

    def to_query(self) -> Select:
        """프로브로부터 SELECT 문을 생성합니다.

        Build the SELECT statement matching this example.
        """
        model: type[T] = self.probe_type
        query: Select = select(model)
        predicates: list[ColumnElement[bool]] = []
        query = self._collect(query, self.probe, model, "", predicates)
        if predicates:
            query = query.where(or_(*predicates) if self.matcher.match_any else and_(*predicates))
        return query

    def _collect(
        self,
        query: Select,
        probe: Any,
        entity: Any,
        prefix: str,
        predicates: list[ColumnElement[bool]],
    ) -> Select:
        mapper = inspect(type(probe))
        state = inspect(probe)

        for prop in mapper.column_attrs:
            path: str = prefix + prop.key
            column = prop.columns[0]
            if column.primary_key or column.foreign_keys or prop.key in _AUDIT_FIELDS:
                continue
            if self.matcher.is_ignored(path):
                continue
            value: Any = state.dict.get(prop.key)
            if value is None:
                continue
            predicates.append(self._compare(getattr(entity, prop.key), value, path))

        for rel in mapper.relationships:
            path = prefix + rel.key
            if rel.uselist or self.matcher.is_ignored(path):
                continue
            related: Any = state.dict.get(rel.key)
            if related is None:
                continue
            target = aliased(rel.mapper.class_)
            query = query.join(getattr(entity, rel.key).of_type(target))
            query = self._collect(query, related, target, path + ".", predicates)

        return query

    def _compare(self, attr: Any, value: Any, path: str) -> ColumnElement[bool]:
        if not isinstance(value, str):
            return attr == value

        if self.matcher.is_ignore_case(path):
            attr, value = func.lower(attr, type_=String), value.lower()

        matcher: StringMatcher = self.matcher.string_matcher
        if matcher is StringMatcher.STARTING:
            return attr.startswith(value, autoescape=True)
        if matcher is StringMatcher.ENDING:
            return attr.endswith(value, autoescape=True)
        if matcher is StringMatcher.CONTAINING:
            return attr.contains(value, autoescape=True)
        return attr == value
