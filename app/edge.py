"""서버리스/엣지 배포용 경량 릴레이 앱.

메인 앱과 같은 네이버 릴레이를 노출하되, 경로를 접두사로 매칭하고 모든 응답에
와일드카드 CORS 헤더를 붙입니다. 릴레이 경로는 요청 메서드와 관계없이 업스트림에
GET으로 전달합니다. 추천/지오코딩 라우터는 포함하지 않습니다.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from app.core.logger import get_logger
from app.schemas.proxy import HealthResponse
from app.services.naver_relay import RELAY_PREFIX, NaverRoute, relay_naver_request

logger = get_logger(__name__)

EDGE_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Naver-Client-Id, X-Naver-Client-Secret",
}


def match_relay_route(path: str) -> NaverRoute | None:
    """요청 경로가 접두사로 일치하는 릴레이 경로를 찾습니다."""
    for route in NaverRoute:
        if path.startswith(f"{RELAY_PREFIX}/{route.value}"):
            return route
    return None


def create_edge_app() -> FastAPI:
    """엣지 배포용 앱을 생성합니다. 헬스 체크 환경은 항상 production입니다."""
    edge_app = FastAPI(title="LunchHunt Edge Relay", docs_url=None, redoc_url=None, openapi_url=None)

    @edge_app.middleware("http")
    async def add_edge_cors_headers(request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            response: Response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(EDGE_CORS_HEADERS)
        return response

    @edge_app.get("/api/health")
    def health_check() -> dict:
        return HealthResponse.now("production").model_dump()

    @edge_app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE"])
    async def dispatch(path: str, request: Request) -> Response:
        route = match_relay_route(request.url.path)
        if route is None:
            logger.info("Edge route not found: %s %s", request.method, request.url.path)
            return PlainTextResponse("Not Found", status_code=404)

        result = await relay_naver_request(route, request.url.query)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return edge_app
