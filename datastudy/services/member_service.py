"""회원 서비스 — 회원 조회/생성 비즈니스 로직.

Member Service — Business logic behind the member endpoints.
Entities never leave this layer: results are mapped to DTOs, and domain
errors are translated into HTTP errors.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.models.member import Member
from datastudy.models.team import Team
from datastudy.repositories.member_repository import member_repository
from datastudy.repositories.team_repository import team_repository
from datastudy.schemas.member import MemberCreate, MemberDto, MemberUsernameResponse
from datastudy.utils.exceptions import BadRequestError, InvalidSortPropertyError, NotFoundError
from datastudy.utils.pagination import Page, PageRequest


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스.

    Service handling member business logic.
    """

    async def get_username(self, db: AsyncSession, member_id: int) -> MemberUsernameResponse:
        """회원 이름을 조회합니다.

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        member: Member | None = await member_repository.find_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return MemberUsernameResponse(username=member.username)

    async def list_members(self, db: AsyncSession, pageable: PageRequest) -> Page[MemberDto]:
        """회원 목록을 페이지 조회하고 DTO로 변환합니다.

        List one page of members as DTOs, team fetched with the page.

        Raises:
            BadRequestError: 정렬 속성이 잘못된 경우 (Unknown sort property)
        """
        try:
            page: Page[Member] = await member_repository.find_all_page(db, pageable)
        except InvalidSortPropertyError as exc:
            raise BadRequestError(str(exc)) from exc
        return page.map(
            lambda m: MemberDto(
                id=m.id,
                username=m.username,
                team_name=m.team.name if m.team is not None else None,
            )
        )

    async def create_member(self, db: AsyncSession, data: MemberCreate) -> MemberDto:
        """새 회원을 생성합니다. 팀을 지정하면 양쪽 연관관계를 함께 설정.

        Create a member, optionally joining an existing team.

        Raises:
            NotFoundError: 팀을 찾을 수 없을 때 (Team not found)
        """
        team: Team | None = None
        if data.team_id is not None:
            team = await team_repository.find_by_id(db, data.team_id)
            if team is None:
                raise NotFoundError("Team not found")

        member: Member = await member_repository.save(db, Member(data.username, data.age, team))
        return MemberDto(
            id=member.id,
            username=member.username,
            team_name=team.name if team is not None else None,
        )


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
