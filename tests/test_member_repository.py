"""회원 레포지토리 통합 테스트.

Member repository integration tests — CRUD, derived/named/declared queries,
return types, paging, bulk update, fetch strategies, read-only and lock
reads, and the custom fragment.
"""

import pytest
import pytest_asyncio
from sqlalchemy import inspect
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.models import Member, Team
from datastudy.repositories.member_query_repository import member_query_repository
from datastudy.repositories.member_repository import member_repository
from datastudy.repositories.team_repository import team_repository
from datastudy.schemas.member import MemberDto
from datastudy.utils.exceptions import EntityNotFoundError
from datastudy.utils.pagination import Direction, PageRequest, Sort
from tests.conftest import flush_and_clear


async def _save_aaa_bbb(db: AsyncSession) -> tuple[Member, Member]:
    member1 = await member_repository.save(db, Member("AAA", 10))
    member2 = await member_repository.save(db, Member("BBB", 20))
    return member1, member2


class TestMemberCrud:
    """기본 CRUD 테스트."""

    async def test_save_and_find(self, db: AsyncSession):
        """저장 후 조회하면 같은 인스턴스."""
        member = Member("memberA")
        saved = await member_repository.save(db, member)

        found = await member_repository.find_by_id(db, saved.id)

        assert found is not None
        assert found.id == member.id
        assert found.username == member.username
        assert found is member

    async def test_basic_crud(self, db: AsyncSession):
        """단건/리스트/카운트/삭제 검증."""
        member1 = await member_repository.save(db, Member("member1"))
        member2 = await member_repository.save(db, Member("member2"))

        assert await member_repository.find_by_id(db, member1.id) is member1
        assert await member_repository.find_by_id(db, member2.id) is member2

        assert len(await member_repository.find_all(db)) == 2
        assert await member_repository.count(db) == 2

        await member_repository.delete(db, member1)
        await member_repository.delete(db, member2)
        assert await member_repository.count(db) == 0

    async def test_save_detached_member_merges(self, db: AsyncSession):
        """식별자가 있는 준영속 엔티티는 merge."""
        member = await member_repository.save(db, Member("before", 10))
        await flush_and_clear(db)

        member.change_username("after")
        merged = await member_repository.save(db, member)

        assert merged is not member
        assert merged.username == "after"
        await flush_and_clear(db)
        reloaded = await member_repository.find_by_id(db, member.id)
        assert reloaded.username == "after"

    async def test_get_by_id_missing(self, db: AsyncSession):
        """없는 ID 조회 시 EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            await member_repository.get_by_id(db, 999_999)

    async def test_delete_by_id_missing(self, db: AsyncSession):
        """없는 ID 삭제 시 EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            await member_repository.delete_by_id(db, 999_999)

    async def test_exists_and_find_all_by_id(self, db: AsyncSession):
        member1, member2 = await _save_aaa_bbb(db)

        assert await member_repository.exists_by_id(db, member1.id) is True
        assert await member_repository.exists_by_id(db, 999_999) is False
        found = await member_repository.find_all_by_id(db, [member1.id, member2.id, 999_999])
        assert {m.id for m in found} == {member1.id, member2.id}

    async def test_save_all(self, db: AsyncSession):
        members = [Member("member1", 10), Member("member2", 20)]

        saved = await member_repository.save_all(db, members)

        assert saved == members
        assert all(m.id is not None and m in db for m in saved)
        assert await member_repository.count(db) == 2

    async def test_delete_all(self, db: AsyncSession):
        """엔티티를 하나씩 조회 후 삭제."""
        await _save_aaa_bbb(db)
        await flush_and_clear(db)

        await member_repository.delete_all(db)

        assert await member_repository.count(db) == 0
        assert await member_repository.find_all(db) == []

    async def test_delete_all_in_batch(self, db: AsyncSession):
        await _save_aaa_bbb(db)

        deleted = await member_repository.delete_all_in_batch(db)

        assert deleted == 2
        assert await member_repository.count(db) == 0


class TestDerivedAndDeclaredQueries:
    """파생/명명/선언 쿼리 테스트."""

    async def test_find_by_username_and_age_greater_than(self, db: AsyncSession):
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("AAA", 20))

        result = await member_repository.find_by_username_and_age_greater_than(db, "AAA", 15)

        assert len(result) == 1
        assert result[0].username == "AAA"
        assert result[0].age == 20

    async def test_named_query(self, db: AsyncSession):
        """명명 쿼리 Member.findByUsername."""
        member1, _ = await _save_aaa_bbb(db)

        result = await member_repository.find_by_username(db, "AAA")

        assert result == [member1]

    async def test_declared_query(self, db: AsyncSession):
        member1, _ = await _save_aaa_bbb(db)

        assert await member_repository.find_user(db, "AAA", 10) == [member1]
        assert await member_repository.find_user(db, "AAA", 20) == []

    async def test_find_username_list(self, db: AsyncSession):
        await _save_aaa_bbb(db)

        usernames = await member_repository.find_username_list(db)

        assert sorted(usernames) == ["AAA", "BBB"]

    async def test_find_member_dto(self, db: AsyncSession):
        """팀과 내부 조인 — 팀 없는 회원은 제외."""
        team = await team_repository.save(db, Team("teamA"))
        member1 = Member("AAA", 10)
        member1.change_team(team)
        await member_repository.save(db, member1)
        await member_repository.save(db, Member("BBB", 20))

        dtos = await member_repository.find_member_dto(db)

        assert dtos == [MemberDto(id=member1.id, username="AAA", team_name="teamA")]

    async def test_find_by_names(self, db: AsyncSession):
        """IN 절 컬렉션 파라미터."""
        member1, member2 = await _save_aaa_bbb(db)
        await member_repository.save(db, Member("CCC", 30))

        result = await member_repository.find_by_names(db, ["AAA", "BBB"])

        assert {m.id for m in result} == {member1.id, member2.id}
        assert await member_repository.find_by_names(db, []) == []


class TestReturnTypes:
    """반환 타입 테스트 — 컬렉션, 단건, Optional."""

    async def test_list_return(self, db: AsyncSession):
        member1, _ = await _save_aaa_bbb(db)

        assert await member_repository.find_list_by_username(db, "AAA") == [member1]
        assert await member_repository.find_list_by_username(db, "nobody") == []

    async def test_single_return(self, db: AsyncSession):
        member1, _ = await _save_aaa_bbb(db)

        assert await member_repository.find_member_by_username(db, "AAA") is member1
        assert await member_repository.find_member_by_username(db, "nobody") is None

    async def test_optional_return(self, db: AsyncSession):
        _, member2 = await _save_aaa_bbb(db)

        assert await member_repository.find_optional_by_username(db, "BBB") is member2
        assert await member_repository.find_optional_by_username(db, "nobody") is None

    async def test_single_return_with_duplicates(self, db: AsyncSession):
        """2건 이상이면 MultipleResultsFound."""
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("AAA", 20))

        with pytest.raises(MultipleResultsFound):
            await member_repository.find_member_by_username(db, "AAA")


class TestPaging:
    """페이징 테스트."""

    async def _save_five(self, db: AsyncSession) -> None:
        for i in range(1, 6):
            await member_repository.save(db, Member(f"member{i}", 10))

    async def test_first_page(self, db: AsyncSession):
        await self._save_five(db)
        page_request = PageRequest.of(0, 3, Sort.by("username", direction=Direction.DESC))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert [m.username for m in page.content] == ["member5", "member4", "member3"]
        assert page.total_elements == 5
        assert page.number == 0
        assert page.total_pages == 2
        assert page.is_first is True
        assert page.has_next is True

    async def test_last_page(self, db: AsyncSession):
        await self._save_five(db)
        page_request = PageRequest.of(1, 3, Sort.by("username", direction=Direction.DESC))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert [m.username for m in page.content] == ["member2", "member1"]
        assert page.is_last is True
        assert page.has_next is False
        assert page.has_previous is True

    async def test_page_map_to_dto(self, db: AsyncSession):
        """엔티티 페이지를 DTO 페이지로 변환."""
        await self._save_five(db)

        page = await member_repository.find_by_age(db, 10, PageRequest.of(0, 3))
        dto_page = page.map(lambda m: MemberDto(id=m.id, username=m.username))

        assert all(isinstance(dto, MemberDto) for dto in dto_page.content)
        assert dto_page.total_elements == 5
        assert dto_page.total_pages == 2

    async def test_page_filters_by_age(self, db: AsyncSession):
        await self._save_five(db)
        await member_repository.save(db, Member("older", 30))

        page = await member_repository.find_by_age(db, 30, PageRequest.of(0, 3))

        assert [m.username for m in page.content] == ["older"]
        assert page.total_elements == 1

    async def test_slice(self, db: AsyncSession):
        """카운트 없는 슬라이스 — 한 건 더 조회해 다음 페이지 판단."""
        await self._save_five(db)

        first = await member_repository.find_slice_by_age(db, 10, PageRequest.of(0, 3, Sort.by("username")))
        second = await member_repository.find_slice_by_age(db, 10, PageRequest.of(1, 3, Sort.by("username")))

        assert [m.username for m in first.content] == ["member1", "member2", "member3"]
        assert first.has_next is True
        assert [m.username for m in second.content] == ["member4", "member5"]
        assert second.has_next is False


class TestBulkUpdate:
    """벌크 업데이트 테스트."""

    async def test_bulk_age_plus(self, db: AsyncSession):
        for name, age in [("member1", 10), ("member2", 19), ("member3", 20), ("member4", 21), ("member5", 40)]:
            await member_repository.save(db, Member(name, age))
        loaded = (await member_repository.find_by_username(db, "member5"))[0]

        result_count = await member_repository.bulk_age_plus(db, 20)

        assert result_count == 3
        # 영속성 컨텍스트가 비워져 새로 조회하면 DB 값이 보임
        assert inspect(loaded).detached
        member5 = (await member_repository.find_by_username(db, "member5"))[0]
        assert member5 is not loaded
        assert member5.age == 41


class TestFetchStrategies:
    """지연 로딩 / 페치 조인 / 엔티티 그래프 테스트."""

    @pytest_asyncio.fixture
    async def two_teams(self, db: AsyncSession) -> None:
        team_a = await team_repository.save(db, Team("teamA"))
        team_b = await team_repository.save(db, Team("teamB"))
        await member_repository.save(db, Member("member1", 10, team_a))
        await member_repository.save(db, Member("member2", 10, team_b))
        await flush_and_clear(db)

    async def test_lazy_loading(self, db: AsyncSession, two_teams):
        """팀은 접근 시점에 별도 쿼리로 로딩."""
        members = await member_query_repository.find_all_members(db)

        for member in members:
            assert "team" not in inspect(member).dict
        names = {m.username: (await m.awaitable_attrs.team).name for m in members}
        assert names == {"member1": "teamA", "member2": "teamB"}

    async def test_fetch_join(self, db: AsyncSession, two_teams):
        members = await member_repository.find_member_fetch_join(db)

        assert all("team" in inspect(m).dict for m in members)
        assert {m.username: m.team.name for m in members} == {"member1": "teamA", "member2": "teamB"}

    async def test_find_all_uses_entity_graph(self, db: AsyncSession, two_teams):
        members = await member_repository.find_all(db)

        assert {m.username: m.team.name for m in members} == {"member1": "teamA", "member2": "teamB"}

    async def test_declared_query_with_entity_graph(self, db: AsyncSession, two_teams):
        members = await member_repository.find_member_entity_graph(db)

        assert all("team" in inspect(m).dict for m in members)

    async def test_named_entity_graph(self, db: AsyncSession, two_teams):
        members = await member_repository.find_entity_graph_by_username(db, "member1")

        assert len(members) == 1
        assert members[0].team.name == "teamA"

    async def test_member_without_team_kept_by_fetch_join(self, db: AsyncSession, two_teams):
        """외부 조인 — 팀 없는 회원도 조회."""
        await member_repository.save(db, Member("loner", 10))
        await flush_and_clear(db)

        members = await member_repository.find_member_fetch_join(db)

        loner = next(m for m in members if m.username == "loner")
        assert loner.team is None


class TestReadOnlyAndLock:
    """읽기 전용 힌트 / 잠금 테스트."""

    async def test_read_only_changes_not_flushed(self, db: AsyncSession):
        """읽기 전용으로 조회한 엔티티는 변경 감지 대상이 아님."""
        member1 = await member_repository.save(db, Member("member1", 10))
        await flush_and_clear(db)

        found = await member_repository.find_read_only_by_username(db, "member1")
        found.change_username("member2")
        await flush_and_clear(db)

        assert inspect(found).detached
        reloaded = await member_repository.find_by_id(db, member1.id)
        assert reloaded.username == "member1"

    async def test_read_only_keeps_managed_instance(self, db: AsyncSession):
        """이미 영속 상태인 엔티티는 읽기 전용 조회 후에도 변경 감지 대상."""
        member1 = await member_repository.save(db, Member("member1", 10))
        await flush_and_clear(db)
        managed = await member_repository.find_by_id(db, member1.id)

        found = await member_repository.find_read_only_by_username(db, "member1")
        managed.change_username("changed")
        await flush_and_clear(db)

        assert found is managed
        reloaded = await member_repository.find_by_id(db, member1.id)
        assert reloaded.username == "changed"

    async def test_dirty_checking_without_hint(self, db: AsyncSession):
        """일반 조회는 변경 감지로 UPDATE."""
        member1 = await member_repository.save(db, Member("member1", 10))
        await flush_and_clear(db)

        found = await member_repository.find_by_id(db, member1.id)
        found.change_username("member2")
        await flush_and_clear(db)

        reloaded = await member_repository.find_by_id(db, member1.id)
        assert reloaded.username == "member2"

    async def test_lock(self, db: AsyncSession):
        await member_repository.save(db, Member("member1", 10))
        await flush_and_clear(db)

        result = await member_repository.find_lock_by_username(db, "member1")

        assert [m.username for m in result] == ["member1"]


class TestCustomRepositories:
    """사용자 정의 조각 / 조회 전용 레포지토리 테스트."""

    async def test_call_custom(self, db: AsyncSession):
        await _save_aaa_bbb(db)

        result = await member_repository.find_member_custom(db)

        assert sorted(m.username for m in result) == ["AAA", "BBB"]

    async def test_member_query_repository(self, db: AsyncSession):
        await _save_aaa_bbb(db)

        result = await member_query_repository.find_all_members(db)

        assert len(result) == 2
