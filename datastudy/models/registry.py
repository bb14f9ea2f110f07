"""명명 쿼리 / 명명 엔티티 그래프 레지스트리.

Named query and named entity graph registry.
Entities register reusable statements under a "<Entity>.<name>" key next
to their mapping. ``validate_named_queries()`` compiles every registered
statement once all models are imported, so a broken query fails at
startup instead of at first use.
"""

from collections.abc import Callable

from sqlalchemy import Select
from sqlalchemy.orm import QueryableAttribute, joinedload
from sqlalchemy.orm.interfaces import ORMOption

_named_queries: dict[str, Callable[[], Select]] = {}
_compiled_queries: dict[str, Select] = {}
_entity_graphs: dict[str, tuple[QueryableAttribute, ...]] = {}


def named_query(name: str, factory: Callable[[], Select]) -> None:
    """명명 쿼리를 등록합니다.

    Register a named query. The factory is invoked lazily by
    ``validate_named_queries`` once every mapper can be configured.

    Raises:
        ValueError: 같은 이름이 이미 등록된 경우 (Duplicate name)
    """
    if name in _named_queries:
        raise ValueError(f"Named query already registered: {name}")
    _named_queries[name] = factory


def named_entity_graph(name: str, *attribute_nodes: QueryableAttribute) -> None:
    """명명 엔티티 그래프를 등록합니다 — 함께 로딩할 연관관계 목록.

    Register a named entity graph: relationships fetched together with the root.
    """
    if name in _entity_graphs:
        raise ValueError(f"Entity graph already registered: {name}")
    _entity_graphs[name] = attribute_nodes


def validate_named_queries() -> None:
    """등록된 모든 명명 쿼리를 생성하고 컴파일합니다.

    Build and compile every registered named query. Idempotent.
    """
    for name, factory in _named_queries.items():
        if name in _compiled_queries:
            continue
        statement: Select = factory()
        statement.compile()
        _compiled_queries[name] = statement


def get_named_query(name: str) -> Select:
    """명명 쿼리를 조회합니다.

    Raises:
        KeyError: 등록되지 않은 이름 (Unknown named query)
    """
    if name not in _compiled_queries:
        if name not in _named_queries:
            raise KeyError(f"No named query registered as {name!r}")
        validate_named_queries()
    return _compiled_queries[name]


def entity_graph(
    *attribute_paths: QueryableAttribute,
    name: str | None = None,
) -> list[ORMOption]:
    """엔티티 그래프를 로더 옵션 목록으로 변환합니다.

    Turn an ad-hoc (attribute paths) or named entity graph into eager
    loader options. Each node becomes a LEFT OUTER JOIN fetch.
    """
    nodes: tuple[QueryableAttribute, ...] = attribute_paths
    if name is not None:
        if name not in _entity_graphs:
            raise KeyError(f"No entity graph registered as {name!r}")
        nodes = nodes + _entity_graphs[name]
    return [joinedload(node) for node in nodes]
