"""회원 API 엔드포인트 테스트.

Member API endpoint tests — lookup, paging parameters, creation and
request-scoped auditing through the X-User-Id header.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.config import settings
from datastudy.models import Member, Team
from datastudy.repositories.member_repository import member_repository
from tests.conftest import flush_and_clear


async def _create_members(db: AsyncSession, count: int) -> list[Member]:
    members = [Member(f"user{i}", i) for i in range(count)]
    db.add_all(members)
    await flush_and_clear(db)
    return members


class TestHealth:
    """헬스 체크 테스트."""

    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestGetMember:
    """회원 단건 조회 API 테스트."""

    async def test_get_member(self, client: AsyncClient, db: AsyncSession):
        members = await _create_members(db, 1)

        resp = await client.get(f"/api/v1/members/{members[0].id}")

        assert resp.status_code == 200
        assert resp.json() == {"username": "user0"}

    async def test_get_member_not_found(self, client: AsyncClient, db: AsyncSession):
        resp = await client.get("/api/v1/members/999999")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Member not found"

    async def test_get_member_invalid_id(self, client: AsyncClient):
        resp = await client.get("/api/v1/members/abc")

        assert resp.status_code == 422


class TestListMembers:
    """회원 페이지 조회 API 테스트."""

    async def test_page_with_sort(self, client: AsyncClient, db: AsyncSession):
        await _create_members(db, 5)

        resp = await client.get("/api/v1/members", params={"page": 0, "size": 3, "sort": "username,desc"})

        assert resp.status_code == 200
        data = resp.json()
        assert [m["username"] for m in data["content"]] == ["user4", "user3", "user2"]
        assert data["total_elements"] == 5
        assert data["total_pages"] == 2
        assert data["number"] == 0
        assert data["size"] == 3
        assert data["is_first"] is True
        assert data["has_next"] is True
        assert data["content"][0]["team_name"] is None

    async def test_page_includes_team_name(self, client: AsyncClient, db: AsyncSession, team_a: Team):
        db.add_all([Member("member1", 10, team_a), Member("member2", 20)])
        await flush_and_clear(db)

        resp = await client.get("/api/v1/members", params={"sort": "username"})

        assert resp.status_code == 200
        assert [(m["username"], m["team_name"]) for m in resp.json()["content"]] == [
            ("member1", "teamA"),
            ("member2", None),
        ]

    async def test_last_page(self, client: AsyncClient, db: AsyncSession):
        await _create_members(db, 5)

        resp = await client.get(
            "/api/v1/members", params={"page": 1, "size": 3, "sort": ["age,asc"]}
        )

        data = resp.json()
        assert [m["username"] for m in data["content"]] == ["user3", "user4"]
        assert data["is_last"] is True
        assert data["has_next"] is False

    async def test_default_page_size(self, client: AsyncClient, db: AsyncSession):
        await _create_members(db, 1)

        resp = await client.get("/api/v1/members")

        data = resp.json()
        assert data["size"] == settings.DEFAULT_PAGE_SIZE
        assert data["total_elements"] == 1

    async def test_size_is_capped(self, client: AsyncClient):
        resp = await client.get("/api/v1/members", params={"size": settings.MAX_PAGE_SIZE + 1})

        assert resp.status_code == 200
        assert resp.json()["size"] == settings.MAX_PAGE_SIZE

    async def test_unknown_sort_property(self, client: AsyncClient):
        resp = await client.get("/api/v1/members", params={"sort": "nickname,asc"})

        assert resp.status_code == 400

    async def test_invalid_sort_direction(self, client: AsyncClient):
        resp = await client.get("/api/v1/members", params={"sort": "username,sideways"})

        assert resp.status_code == 400

    async def test_negative_page(self, client: AsyncClient):
        resp = await client.get("/api/v1/members", params={"page": -1})

        assert resp.status_code == 422


class TestCreateMember:
    """회원 생성 API 테스트."""

    async def test_create_member_with_team(self, client: AsyncClient, db: AsyncSession, team_a: Team):
        resp = await client.post(
            "/api/v1/members",
            json={"username": "member1", "age": 10, "team_id": team_a.id},
            headers={"X-User-Id": "admin"},
        )

        assert resp.status_code == 201
        data = resp.json()
        assert data["username"] == "member1"
        assert data["team_name"] == "teamA"

        db.expunge_all()
        created = await member_repository.get_by_id(db, data["id"])
        assert created.created_by == "admin"
        assert created.last_modified_by == "admin"
        assert created.team_id == team_a.id

    async def test_create_member_default_auditor(self, client: AsyncClient, db: AsyncSession):
        resp = await client.post("/api/v1/members", json={"username": "member1"})

        assert resp.status_code == 201
        assert resp.json()["team_name"] is None

        db.expunge_all()
        created = await member_repository.get_by_id(db, resp.json()["id"])
        assert created.age == 0
        assert created.created_by == settings.DEFAULT_AUDITOR

    async def test_create_member_unknown_team(self, client: AsyncClient):
        resp = await client.post("/api/v1/members", json={"username": "member1", "team_id": 999999})

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Team not found"

    async def test_create_member_invalid_body(self, client: AsyncClient):
        resp = await client.post("/api/v1/members", json={"username": "", "age": -1})

        assert resp.status_code == 422
