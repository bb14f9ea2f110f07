"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API request to Axiom: method, path,
query/path parameters, request body, status code, duration, auditor
(X-User-Id header) and error detail. Sensitive keys are masked.
Without an Axiom token and dataset the middleware passes requests through.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from datastudy.config import settings

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and params
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_BODY_METHODS = {"POST", "PUT", "PATCH"}


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive keys in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


def _error_detail(body: bytes) -> str:
    try:
        data = json.loads(body)
        detail = data.get("detail", data) if isinstance(data, dict) else data
        return str(detail)[:500]
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs API requests and responses to Axiom.
    """

    def __init__(self, app: Any, client: AxiomClient | None = None, dataset: str | None = None) -> None:
        super().__init__(app)
        self._dataset: str = dataset or settings.AXIOM_DATASET
        self._client: AxiomClient | None = client

        if self._client is None and settings.AXIOM_API_TOKEN and self._dataset:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # 제외 경로 또는 Axiom 미설정 — Skip excluded paths / pass through when unconfigured
        if request.url.path in _SKIP_PATHS or self._client is None:
            return await call_next(request)

        start_time: float = time.time()
        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        if request.headers.get("x-user-id"):
            event["auditor"] = request.headers["x-user-id"]

        # Request body 읽기 — JSON bodies only, masked
        if request.method in _BODY_METHODS:
            body_bytes: bytes = await request.body()
            if body_bytes:
                try:
                    event["request_body"] = mask_sensitive(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    event["request_body"] = "(non-json body)"

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code

            # 에러 응답시 body에서 사유 추출 후 응답 재구성
            if response.status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_detail(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception:
                pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure

        return response
