"""네이버 Open API 릴레이 라우터.

브라우저에서 직접 호출할 수 없는 네이버 API를 자격 증명 헤더만 붙여 중계합니다.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.schemas.proxy import RelayErrorResponse
from app.services.naver_relay import RELAY_PREFIX, NaverRoute, relay_naver_request

router = APIRouter(prefix=RELAY_PREFIX, tags=["naver-proxy"])

_RELAY_RESPONSES = {
    500: {"model": RelayErrorResponse, "description": "네트워크 또는 응답 파싱 오류"},
}


async def _relay(route: NaverRoute, request: Request) -> JSONResponse:
    result = await relay_naver_request(route, request.url.query)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get(f"/{NaverRoute.LOCAL_SEARCH.value}", responses=_RELAY_RESPONSES)
async def local_search(request: Request) -> JSONResponse:
    """네이버 로컬 검색 API 프록시."""
    return await _relay(NaverRoute.LOCAL_SEARCH, request)


@router.get(f"/{NaverRoute.IMAGE_SEARCH.value}", responses=_RELAY_RESPONSES)
async def image_search(request: Request) -> JSONResponse:
    """네이버 이미지 검색 API 프록시."""
    return await _relay(NaverRoute.IMAGE_SEARCH, request)


@router.get(f"/{NaverRoute.REVERSE_GEOCODE.value}", responses=_RELAY_RESPONSES)
async def reverse_geocode(request: Request) -> JSONResponse:
    """네이버 Reverse Geocoding API 프록시."""
    return await _relay(NaverRoute.REVERSE_GEOCODE, request)
