"""명세(Specification) 기반 동적 조건 모듈.

Specification-based dynamic criteria module.
A Specification turns an entity class into a SQL criterion. Specifications
compose with ``&``, ``|`` and ``~``; a specification that yields ``None``
places no restriction, so optional search fields can be combined freely.

Usage:
    spec = MemberSpec.username("m1") & MemberSpec.team_name("teamA")
    members = await member_repository.find_all_by_spec(db, spec)
"""

from collections.abc import Callable
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, and_, not_, or_

from datastudy.models.member import Member
from datastudy.models.team import Team

T = TypeVar("T")

Predicate = Callable[[type[T]], ColumnElement[bool] | None]


class Specification(Generic[T]):
    """엔티티에 대한 조건 명세.

    Criterion factory for an entity class.

    Attributes:
        predicate: 엔티티 클래스를 받아 조건식(또는 None)을 반환하는 함수
                   (Callable returning a criterion, or None for "no restriction")
    """

    def __init__(self, predicate: Predicate) -> None:
        self.predicate: Predicate = predicate

    @classmethod
    def where(cls, spec: "Specification[T] | None") -> "Specification[T]":
        """None을 허용하는 시작점 — Null-safe starting point for a chain."""
        return spec if spec is not None else cls(lambda model: None)

    def to_predicate(self, model: type[T]) -> ColumnElement[bool] | None:
        return self.predicate(model)

    def and_(self, other: "Specification[T]") -> "Specification[T]":
        def predicate(model: type[T]) -> ColumnElement[bool] | None:
            left, right = self.to_predicate(model), other.to_predicate(model)
            if left is None or right is None:
                return right if left is None else left
            return and_(left, right)

        return Specification(predicate)

    def or_(self, other: "Specification[T]") -> "Specification[T]":
        def predicate(model: type[T]) -> ColumnElement[bool] | None:
            left, right = self.to_predicate(model), other.to_predicate(model)
            if left is None or right is None:
                return right if left is None else left
            return or_(left, right)

        return Specification(predicate)

    def not_(self) -> "Specification[T]":
        def predicate(model: type[T]) -> ColumnElement[bool] | None:
            inner = self.to_predicate(model)
            return None if inner is None else not_(inner)

        return Specification(predicate)

    __and__ = and_
    __or__ = or_
    __invert__ = not_


class MemberSpec:
    """회원 검색 조건 모음 — Member search specifications."""

    @staticmethod
    def username(username: str | None) -> Specification[Member]:
        """회원 이름 일치 조건. 빈 값이면 조건 없음."""

        def predicate(model: type[Member]) -> ColumnElement[bool] | None:
            if not username:
                return None
            return model.username == username

        return Specification(predicate)

    @staticmethod
    def team_name(team_name: str | None) -> Specification[Member]:
        """소속 팀 이름 일치 조건 — 팀이 없는 회원은 제외(inner join 의미).

        Team name equality; members without a team never match.
        """

        def predicate(model: type[Member]) -> ColumnElement[bool] | None:
            if not team_name:
                return None
            return model.team.has(Team.name == team_name)

        return Specification(predicate)
