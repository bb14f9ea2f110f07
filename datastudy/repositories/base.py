"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all entity repositories.
Provides save/find/count/delete, paging, specification and
query-by-example execution for a single entity type.

Usage:
    class TeamRepository(BaseRepository[Team]):
        def __init__(self) -> None:
            super().__init__(Team)
"""

from collections.abc import Iterable
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.database import Base
from datastudy.repositories.example import Example
from datastudy.repositories.specifications import Specification
from datastudy.utils.exceptions import EntityNotFoundError
from datastudy.utils.pagination import Page, PageRequest, Sort, apply_sort, paginate

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Every method takes the session explicitly; nothing is committed here,
    transaction boundaries belong to the caller.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    def is_new(self, entity: ModelType) -> bool:
        """신규 엔티티인지 판단합니다.

        Decide whether the entity has never been stored. Entities exposing
        an ``is_new`` attribute decide for themselves; otherwise an entity
        whose primary key is unset is new.
        """
        is_new: bool | None = getattr(entity, "is_new", None)
        if is_new is not None:
            return bool(is_new)
        identity = inspect(self.model).primary_key_from_instance(entity)
        return all(value is None for value in identity)

    async def save(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """엔티티를 저장합니다. 신규면 persist, 아니면 merge.

        Persist a new entity (INSERT on flush) or merge a detached one
        (SELECT then INSERT/UPDATE). Returns the managed instance, which
        for a merge is a different object than the one passed in.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 저장할 엔티티 (Entity to save)

        Returns:
            ModelType: 영속 상태의 엔티티 (Managed entity)
        """
        if self.is_new(entity):
            db.add(entity)
            await db.flush()
            return entity

        merged: ModelType = await db.merge(entity)
        await db.flush()
        return merged

    async def save_all(self, db: AsyncSession, entities: Iterable[ModelType]) -> list[ModelType]:
        return [await self.save(db, entity) for entity in entities]

    async def find_by_id(self, db: AsyncSession, record_id: Any) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다. 영속성 컨텍스트에 있으면 SQL 없이 반환.

        Retrieve a single record by primary key. Returns the instance already
        in the identity map without a query when present.

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        return await db.get(self.model, record_id)

    async def get_by_id(self, db: AsyncSession, record_id: Any) -> ModelType:
        """ID로 조회하고, 없으면 예외를 발생시킵니다.

        Raises:
            EntityNotFoundError: 레코드가 없을 때 (No such record)
        """
        entity: ModelType | None = await self.find_by_id(db, record_id)
        if entity is None:
            raise EntityNotFoundError(self.model, record_id)
        return entity

    async def exists_by_id(self, db: AsyncSession, record_id: Any) -> bool:
        query: Select = select(func.count()).select_from(self.model).where(self.model.id == record_id)
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def count(self, db: AsyncSession) -> int:
        """전체 레코드 수를 조회합니다 — Count all rows."""
        query: Select = select(func.count()).select_from(self.model)
        return (await db.execute(query)).scalar() or 0

    async def find_all(self, db: AsyncSession, sort: Sort | None = None) -> Sequence[ModelType]:
        """모든 레코드를 조회합니다.

        Retrieve all records, optionally sorted.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            sort: 정렬 조건 (Sort, optional)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록 (List of records)
        """
        query: Select = select(self.model)
        if sort is not None:
            query = apply_sort(query, self.model, sort)
        result = await db.execute(query)
        return result.scalars().all()

    async def find_all_by_id(self, db: AsyncSession, record_ids: Iterable[Any]) -> Sequence[ModelType]:
        query: Select = select(self.model).where(self.model.id.in_(list(record_ids)))
        result = await db.execute(query)
        return result.scalars().all()

    async def find_all_page(self, db: AsyncSession, pageable: PageRequest) -> Page[ModelType]:
        """페이지 단위로 조회합니다 — Retrieve one page of all records."""
        return await paginate(db, select(self.model), pageable, model=self.model)

    async def delete(self, db: AsyncSession, entity: ModelType) -> None:
        """엔티티를 삭제합니다.

        Delete a managed entity; the DELETE is flushed immediately.
        """
        await db.delete(entity)
        await db.flush()

    async def delete_by_id(self, db: AsyncSession, record_id: Any) -> None:
        """ID로 레코드를 삭제합니다.

        Raises:
            EntityNotFoundError: 레코드가 없을 때 (No such record)
        """
        entity: ModelType = await self.get_by_id(db, record_id)
        await self.delete(db, entity)

    async def delete_all(self, db: AsyncSession) -> None:
        """모든 엔티티를 하나씩 조회 후 삭제합니다 — One DELETE per entity."""
        for entity in await self.find_all(db):
            await db.delete(entity)
        await db.flush()

    async def delete_all_in_batch(self, db: AsyncSession) -> int:
        """단일 DELETE 문으로 모든 레코드를 삭제합니다.

        Delete every row with one statement. The persistence context is not
        synchronized; instances already loaded stay in memory.

        Returns:
            int: 삭제된 행 수 (Deleted row count)
        """
        await db.flush()
        result = await db.execute(
            delete(self.model).execution_options(synchronize_session=False)
        )
        return result.rowcount

    # === 명세 실행 (Specification executor) ===

    def _spec_query(self, spec: Specification[ModelType] | None) -> Select:
        query: Select = select(self.model)
        predicate = Specification.where(spec).to_predicate(self.model)
        if predicate is not None:
            query = query.where(predicate)
        return query

    async def find_all_by_spec(
        self,
        db: AsyncSession,
        spec: Specification[ModelType] | None,
        sort: Sort | None = None,
    ) -> Sequence[ModelType]:
        """명세 조건에 맞는 레코드를 조회합니다.

        Retrieve records matching a specification.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            spec: 조회 명세, None이면 전체 (Specification; None matches all)
            sort: 정렬 조건 (Sort, optional)
        """
        query: Select = self._spec_query(spec)
        if sort is not None:
            query = apply_sort(query, self.model, sort)
        result = await db.execute(query)
        return result.scalars().all()

    async def find_one_by_spec(
        self,
        db: AsyncSession,
        spec: Specification[ModelType] | None,
    ) -> ModelType | None:
        """명세 조건에 맞는 단일 레코드 — 2건 이상이면 MultipleResultsFound."""
        result = await db.execute(self._spec_query(spec))
        return result.scalar_one_or_none()

    async def count_by_spec(self, db: AsyncSession, spec: Specification[ModelType] | None) -> int:
        query: Select = select(func.count()).select_from(self._spec_query(spec).subquery())
        return (await db.execute(query)).scalar() or 0

    async def find_page_by_spec(
        self,
        db: AsyncSession,
        spec: Specification[ModelType] | None,
        pageable: PageRequest,
    ) -> Page[ModelType]:
        return await paginate(db, self._spec_query(spec), pageable, model=self.model)

    # === 예제 기반 조회 (Query by example) ===

    async def find_all_by_example(
        self,
        db: AsyncSession,
        example: Example[ModelType],
        sort: Sort | None = None,
    ) -> Sequence[ModelType]:
        """프로브 엔티티와 일치하는 레코드를 조회합니다.

        Retrieve records matching a probe entity.
        """
        query: Select = example.to_query()
        if sort is not None:
            query = apply_sort(query, self.model, sort)
        result = await db.execute(query)
        return result.scalars().all()

    async def count_by_example(self, db: AsyncSession, example: Example[ModelType]) -> int:
        query: Select = select(func.count()).select_from(example.to_query().subquery())
        return (await db.execute(query)).scalar() or 0
