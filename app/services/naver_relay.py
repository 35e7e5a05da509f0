"""네이버 Open API 릴레이 서비스.

브라우저가 보낸 쿼리 문자열을 그대로 업스트림에 붙이고, 서버 측에서만
자격 증명 헤더를 추가해 전달합니다. 캐시/재시도/속도 제한은 하지 않습니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import requests

from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout

logger = get_logger(__name__)

RELAY_PREFIX = "/api/naver/v1"


class NaverRoute(StrEnum):
    """릴레이가 지원하는 네이버 API 경로 (`RELAY_PREFIX` 기준 상대 경로)."""

    LOCAL_SEARCH = "search/local.json"
    IMAGE_SEARCH = "search/image"
    REVERSE_GEOCODE = "map-reversegeocode/v2/gc"


UPSTREAM_URLS: dict[NaverRoute, str] = {
    NaverRoute.LOCAL_SEARCH: "https://openapi.naver.com/v1/search/local.json",
    NaverRoute.IMAGE_SEARCH: "https://openapi.naver.com/v1/search/image",
    NaverRoute.REVERSE_GEOCODE: "https://naveropenapi.apigw.ntruss.com/map-reversegeocode/v2/gc",
}

_ROUTE_LABELS: dict[NaverRoute, str] = {
    NaverRoute.LOCAL_SEARCH: "네이버 로컬 검색",
    NaverRoute.IMAGE_SEARCH: "네이버 이미지 검색",
    NaverRoute.REVERSE_GEOCODE: "네이버 Reverse Geocoding",
}


@dataclass(frozen=True, slots=True)
class RelayResult:
    """업스트림 응답 상태 코드와 JSON 본문."""

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_naver_headers(settings: Settings) -> dict[str, str]:
    """네이버 API 호출에 필요한 자격 증명 헤더를 생성합니다."""
    return {
        "X-Naver-Client-Id": settings.NAVER_CLIENT_ID,
        "X-Naver-Client-Secret": settings.NAVER_CLIENT_SECRET,
        "User-Agent": settings.NAVER_USER_AGENT,
    }


def build_upstream_url(route: NaverRoute, query_string: str) -> str:
    """쿼리 문자열을 그대로 붙인 업스트림 URL을 만듭니다."""
    base = UPSTREAM_URLS[route]
    query = query_string.lstrip("?")
    return f"{base}?{query}" if query else base


def _error_details(response: requests.Response | None, exc: Exception) -> Any:
    if response is None:
        return str(exc)
    try:
        return response.json()
    except ValueError:
        return response.text or str(exc)


async def relay_naver_request(
    route: NaverRoute,
    query_string: str,
    settings: Settings | None = None,
) -> RelayResult:
    """네이버 API로 요청을 전달하고 응답을 그대로 반환합니다.

    업스트림이 오류 상태를 반환하면 해당 상태 코드로, 네트워크/파싱 오류는 500으로
    `{error, details}` 봉투를 만들어 반환합니다.
    """
    resolved_settings = settings or get_settings()
    url = build_upstream_url(route, query_string)
    headers = build_naver_headers(resolved_settings)
    request_timeout = to_requests_timeout(get_timeout_policy(resolved_settings).naver_api_timeout_seconds)
    label = _ROUTE_LABELS[route]

    def _send() -> requests.Response:
        return requests.get(url, headers=headers, timeout=request_timeout)

    logger.info("%s 프록시 요청: query=%s", label, query_string)
    try:
        response = await asyncio.to_thread(_send)
        response.raise_for_status()
        body = response.json()
    except requests.HTTPError as exc:
        upstream = exc.response
        status_code = upstream.status_code if upstream is not None else 500
        details = _error_details(upstream, exc)
        logger.error("%s 실패: status=%s details=%s", label, status_code, details)
        return RelayResult(status_code=status_code, body={"error": f"{label} 실패", "details": details})
    except (requests.RequestException, ValueError) as exc:
        logger.error("%s 실패: %s", label, exc)
        return RelayResult(status_code=500, body={"error": f"{label} 실패", "details": str(exc)})

    items = body.get("items") if isinstance(body, dict) else None
    logger.info("%s 성공: status=%s items=%s", label, response.status_code, len(items) if items else 0)
    return RelayResult(status_code=response.status_code, body=body)
