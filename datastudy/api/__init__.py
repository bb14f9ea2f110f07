"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router.

Included routers:
    - members: 회원 조회/생성 (Member lookup, paging and creation)
"""

from fastapi import APIRouter, Depends

from datastudy.api.deps import audit_context
from datastudy.api.members import router as members_router

api_router: APIRouter = APIRouter(dependencies=[Depends(audit_context)])
api_router.include_router(members_router, prefix="/members", tags=["Members"])
