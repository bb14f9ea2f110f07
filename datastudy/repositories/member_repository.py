"""회원 레포지토리 — 파생/명명/선언/네이티브 쿼리와 프로젝션.

Member Repository — Derived, named, declared and native queries plus
projections, paging, bulk update, entity graphs, read-only and locking
reads. Generic CRUD, specifications and query-by-example come from
BaseRepository; ``find_member_custom`` comes from the custom fragment.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, bindparam, func, inspect, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from datastudy.models.member import Member
from datastudy.models.registry import entity_graph, get_named_query
from datastudy.models.team import Team
from datastudy.repositories.base import BaseRepository
from datastudy.repositories.member_repository_custom import MemberRepositoryCustom
from datastudy.repositories.projection import projection_query, to_projections
from datastudy.schemas.member import MemberDto, MemberProjection, UsernameOnly
from datastudy.utils.pagination import (
    Page,
    PageRequest,
    Slice,
    Sort,
    apply_sort,
    paginate,
    paginate_slice,
)

P = TypeVar("P", bound=BaseModel)

# ---------------------------------------------------------------------------
# 선언 쿼리 — 모듈 로딩 시점에 생성되어 오류를 조기에 발견
# Declared queries, built at import time
# ---------------------------------------------------------------------------
_FIND_USER: Select = select(Member).where(
    Member.username == bindparam("username"),
    Member.age == bindparam("age"),
)

_FIND_USERNAME_LIST: Select = select(Member.username)

_FIND_MEMBER_DTO: Select = select(Member.id, Member.username, Team.name).join(Member.team)

_FIND_BY_NAMES: Select = select(Member).where(
    Member.username.in_(bindparam("names", expanding=True))
)

# 네이티브 쿼리 — Native SQL
_NATIVE_FIND_BY_USERNAME = text("select * from member where username = :username")

_NATIVE_PROJECTION_SQL: str = (
    "SELECT m.member_id AS id, m.username, t.name AS team_name "
    "FROM member m LEFT JOIN team t ON m.team_id = t.team_id "
    "ORDER BY m.member_id"
)
# 네이티브 쿼리는 카운트 쿼리를 반드시 따로 작성
_NATIVE_PROJECTION_COUNT = text("SELECT count(*) FROM member")


class MemberRepository(BaseRepository[Member], MemberRepositoryCustom):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the member table.
    """

    def __init__(self) -> None:
        """MemberRepository를 초기화합니다.

        Initialize the MemberRepository with the Member model.
        """
        super().__init__(Member)

    # === 파생 쿼리 (Derived queries) ===

    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """이름이 같고 나이가 주어진 값보다 큰 회원을 조회합니다.

        Members with the given username and an age strictly greater than ``age``.
        """
        query: Select = select(Member).where(Member.username == username, Member.age > age)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_list_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """컬렉션 반환 — 결과가 없으면 빈 리스트 (Empty list when nothing matches)."""
        result = await db.execute(select(Member).where(Member.username == username))
        return list(result.scalars().all())

    async def find_member_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """단건 반환 — 없으면 None, 2건 이상이면 MultipleResultsFound.

        Single result: None when absent, raises MultipleResultsFound for
        more than one row.
        """
        result = await db.execute(select(Member).where(Member.username == username))
        return result.scalar_one_or_none()

    async def find_optional_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """단건 Optional 반환 — find_member_by_username과 같은 규칙."""
        result = await db.execute(select(Member).where(Member.username == username))
        return result.scalar_one_or_none()

    # === 명명 쿼리 / 선언 쿼리 (Named and declared queries) ===

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """명명 쿼리 "Member.findByUsername"으로 회원을 조회합니다.

        Execute the registered named query ``Member.findByUsername``.
        """
        result = await db.execute(get_named_query("Member.findByUsername"), {"username": username})
        return list(result.scalars().all())

    async def find_user(self, db: AsyncSession, username: str, age: int) -> list[Member]:
        """이름과 나이가 모두 일치하는 회원 — 선언 쿼리."""
        result = await db.execute(_FIND_USER, {"username": username, "age": age})
        return list(result.scalars().all())

    async def find_username_list(self, db: AsyncSession) -> list[str | None]:
        """회원 이름 목록 — 단일 컬럼 조회 (Scalar column projection)."""
        result = await db.execute(_FIND_USERNAME_LIST)
        return list(result.scalars().all())

    async def find_member_dto(self, db: AsyncSession) -> list[MemberDto]:
        """팀과 내부 조인하여 DTO로 조회합니다.

        Members joined with their team, returned as MemberDto. Members
        without a team are excluded (inner join).
        """
        result = await db.execute(_FIND_MEMBER_DTO)
        return [
            MemberDto(id=member_id, username=username, team_name=team_name)
            for member_id, username, team_name in result.all()
        ]

    async def find_by_names(self, db: AsyncSession, names: Iterable[str]) -> list[Member]:
        """이름 목록에 포함된 회원 — IN 절 (Collection parameter binding)."""
        result = await db.execute(_FIND_BY_NAMES, {"names": list(names)})
        return list(result.scalars().all())

    # === 페이징 (Paging) ===

    def _by_age_query(self, age: int) -> Select:
        return select(Member).outerjoin(Member.team).where(Member.age == age)

    async def find_by_age(self, db: AsyncSession, age: int, pageable: PageRequest) -> Page[Member]:
        """나이로 회원을 페이지 조회합니다.

        Page of members with the given age. The content query left-joins
        team; the count query skips the join and counts usernames only.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            age: 나이 (Age to match)
            pageable: 페이지 요청 (Page request, zero-based)

        Returns:
            Page[Member]: 회원 페이지 (Page of members)
        """
        count_query: Select = select(func.count(Member.username)).where(Member.age == age)
        return await paginate(db, self._by_age_query(age), pageable, model=Member, count_query=count_query)

    async def find_slice_by_age(self, db: AsyncSession, age: int, pageable: PageRequest) -> Slice[Member]:
        """카운트 쿼리 없는 슬라이스 조회 — Slice without a count query."""
        return await paginate_slice(db, self._by_age_query(age), pageable, model=Member)

    # === 벌크 연산 (Bulk update) ===

    async def bulk_age_plus(self, db: AsyncSession, age: int) -> int:
        """나이가 ``age`` 이상인 회원의 나이를 1 증가시킵니다.

        Bulk ``age = age + 1`` for members aged ``age`` or more. The UPDATE
        bypasses the persistence context, so pending changes are flushed
        first and the context is cleared afterwards; entities loaded before
        the call are detached and must be queried again.

        Returns:
            int: 변경된 행 수 (Affected row count)
        """
        await db.flush()
        result = await db.execute(
            update(Member)
            .where(Member.age >= age)
            .values(age=Member.age + 1)
            .execution_options(synchronize_session=False)
        )
        # 영속성 컨텍스트 초기화 — stale 엔티티 제거 (clear automatically)
        db.expunge_all()
        return result.rowcount

    # === 페치 조인 / 엔티티 그래프 (Fetch join / entity graph) ===

    async def find_member_fetch_join(self, db: AsyncSession) -> list[Member]:
        """팀을 페치 조인으로 함께 조회합니다 — Left join fetch team."""
        query: Select = select(Member).outerjoin(Member.team).options(contains_eager(Member.team))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_all(self, db: AsyncSession, sort: Sort | None = None) -> list[Member]:
        """전체 회원 조회 — 팀 엔티티 그래프 적용 (Overridden with a team entity graph)."""
        query: Select = select(Member).options(*entity_graph(Member.team))
        if sort is not None:
            query = apply_sort(query, Member, sort)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_all_page(self, db: AsyncSession, pageable: PageRequest) -> Page[Member]:
        """전체 회원 페이지 조회 — 팀 엔티티 그래프 적용, 카운트는 조인 없이."""
        query: Select = select(Member).options(*entity_graph(Member.team))
        count_query: Select = select(func.count()).select_from(Member)
        return await paginate(db, query, pageable, model=Member, count_query=count_query)

    async def find_member_entity_graph(self, db: AsyncSession) -> list[Member]:
        """선언 쿼리에 엔티티 그래프를 더해 조회합니다."""
        result = await db.execute(select(Member).options(*entity_graph(Member.team)))
        return list(result.scalars().all())

    async def find_entity_graph_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """명명 엔티티 그래프 "Member.all"로 조회합니다."""
        query: Select = (
            select(Member)
            .options(*entity_graph(name="Member.all"))
            .where(Member.username == username)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    # === 읽기 전용 / 잠금 (Read-only hint / locking) ===

    async def find_read_only_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """읽기 전용 조회 — 변경 감지 대상에서 제외.

        Read-only lookup: an instance loaded by this query is detached from
        the session, so the change detector never sees it and modifications
        are never flushed. Lazy relationships are not loadable on it.
        An instance already managed before the call is returned as is and
        stays dirty-checked.
        """
        already_managed = set(db.identity_map.keys())
        result = await db.execute(select(Member).where(Member.username == username))
        member: Member | None = result.scalar_one_or_none()
        if member is not None and inspect(member).identity_key not in already_managed:
            db.expunge(member)
        return member

    async def find_lock_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """비관적 쓰기 잠금으로 조회합니다 — SELECT ... FOR UPDATE.

        Pessimistic write lock. Dialects without row locks (SQLite) render
        a plain SELECT.
        """
        query: Select = select(Member).where(Member.username == username).with_for_update()
        result = await db.execute(query)
        return list(result.scalars().all())

    # === 프로젝션 (Projections) ===

    async def find_projections_by_username(self, db: AsyncSession, username: str) -> list[UsernameOnly]:
        """이름만 조회하는 닫힌 프로젝션 — Closed projection on username."""
        return await self.find_projections_dto_by_username(db, username, UsernameOnly)

    async def find_projections_dto_by_username(
        self,
        db: AsyncSession,
        username: str,
        projection_type: type[P],
    ) -> list[P]:
        """동적 프로젝션 — 반환 타입의 필드로 조회 컬럼을 결정합니다.

        Dynamic projection: the projection type's fields decide the columns.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 회원 이름 (Username to match)
            projection_type: 프로젝션 타입 (Pydantic projection model)

        Returns:
            list[P]: 프로젝션 목록 (Projection instances)
        """
        query, convert = projection_query(Member, projection_type)
        result = await db.execute(query.where(Member.username == username))
        return to_projections(result.all(), convert)

    # === 네이티브 쿼리 (Native queries) ===

    async def find_by_native_query(self, db: AsyncSession, username: str) -> Member | None:
        """네이티브 SQL 결과를 회원 엔티티로 매핑합니다.

        Map a raw SQL result onto Member. Single result rules apply.
        """
        query = select(Member).from_statement(_NATIVE_FIND_BY_USERNAME)
        result = await db.execute(query, {"username": username})
        return result.scalar_one_or_none()

    async def find_by_native_projection(
        self,
        db: AsyncSession,
        pageable: PageRequest,
    ) -> Page[MemberProjection]:
        """네이티브 SQL 프로젝션을 페이지 조회합니다.

        Page of native-SQL projections (member left join team), counted
        with a separate native count query. Sort on the request is not
        applied; rows are ordered by member id.
        """
        total: int = (await db.execute(_NATIVE_PROJECTION_COUNT)).scalar() or 0

        query = text(f"{_NATIVE_PROJECTION_SQL} LIMIT :limit OFFSET :offset")
        result = await db.execute(query, {"limit": pageable.size, "offset": pageable.offset})
        content: Sequence[MemberProjection] = [
            MemberProjection(id=row.id, username=row.username, team_name=row.team_name)
            for row in result
        ]
        return Page(content=list(content), total_elements=total, number=pageable.page, size=pageable.size)


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
