"""동적 프로젝션 모듈 — Pydantic 모델 필드로 SELECT 컬럼을 결정.

Dynamic projection module.
Builds a SELECT for a projection type from its field names: a field that
names an entity column selects that column; a field typed as a nested
model and named after a many-to-one relationship selects the related
columns through a LEFT OUTER JOIN.
"""

from collections.abc import Callable, Sequence
from types import NoneType, UnionType
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel
from sqlalchemy import Row, Select, inspect, select
from sqlalchemy.orm import aliased

P = TypeVar("P", bound=BaseModel)


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    """Optional[Model] / Model 주석에서 중첩 모델 타입을 추출합니다."""
    if get_origin(annotation) in (Union, UnionType):
        args = [a for a in get_args(annotation) if a is not NoneType]
        annotation = args[0] if len(args) == 1 else None
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def projection_query(model: type, projection_type: type[P]) -> tuple[Select, Callable[[Row], P]]:
    """프로젝션 타입에 맞는 SELECT 문과 행 변환 함수를 만듭니다.

    Build the SELECT for ``projection_type`` over ``model`` and a converter
    turning each result row into a projection instance.

    Args:
        model: 루트 엔티티 클래스 (Root entity class)
        projection_type: Pydantic 프로젝션 타입 (Projection model)

    Returns:
        tuple[Select, Callable[[Row], P]]: (조회 쿼리, 행 변환 함수)

    Raises:
        ValueError: 엔티티에 없는 필드 (Field maps to no column or relationship)
    """
    mapper = inspect(model)
    columns: list[Any] = []
    nested: dict[str, type[BaseModel]] = {}
    query_joins: list[Any] = []

    for name, field in projection_type.model_fields.items():
        nested_type = _nested_model(field.annotation)
        if nested_type is not None and name in mapper.relationships:
            relationship = mapper.relationships[name]
            target = aliased(relationship.mapper.class_)
            query_joins.append(getattr(model, name).of_type(target))
            nested[name] = nested_type
            for sub_name in nested_type.model_fields:
                columns.append(getattr(target, sub_name).label(f"{name}__{sub_name}"))
        elif name in mapper.column_attrs:
            columns.append(getattr(model, name).label(name))
        else:
            raise ValueError(
                f"Projection {projection_type.__name__}.{name} matches no property of {model.__name__}"
            )

    query: Select = select(*columns).select_from(model)
    for join_target in query_joins:
        query = query.outerjoin(join_target)

    def convert(row: Row) -> P:
        mapping = row._mapping
        data: dict[str, Any] = {}
        for name in projection_type.model_fields:
            if name in nested:
                values = {
                    sub_name: mapping[f"{name}__{sub_name}"]
                    for sub_name in nested[name].model_fields
                }
                # 외부 조인 결과가 모두 NULL이면 연관 엔티티 없음
                data[name] = None if all(v is None for v in values.values()) else nested[name](**values)
            else:
                data[name] = mapping[name]
        return projection_type(**data)

    return query, convert


def to_projections(rows: Sequence[Row], convert: Callable[[Row], P]) -> list[P]:
    return [convert(row) for row in rows]
