"""회원 라우터 — 회원 조회/페이지/생성 엔드포인트.

Member Router — Member lookup, paging and creation endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.api.deps import get_page_request
from datastudy.database import get_db
from datastudy.schemas.member import MemberCreate, MemberDto, MemberUsernameResponse
from datastudy.services.member_service import member_service
from datastudy.utils.pagination import Page, PageRequest

router: APIRouter = APIRouter()


@router.get("", response_model=Page[MemberDto])
async def list_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    pageable: Annotated[PageRequest, Depends(get_page_request)],
) -> Page[MemberDto]:
    """회원 목록을 페이지 조회합니다.

    List members page by page (``?page=0&size=20&sort=username,desc``).
    """
    return await member_service.list_members(db, pageable)


@router.get("/{member_id}", response_model=MemberUsernameResponse)
async def get_member(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberUsernameResponse:
    """회원 이름을 조회합니다 — Return the member's username."""
    return await member_service.get_username(db, member_id)


@router.post("", response_model=MemberDto, status_code=201)
async def create_member(
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberDto:
    """새 회원을 생성합니다 — Create a member."""
    result: MemberDto = await member_service.create_member(db, data)
    await db.commit()
    return result
