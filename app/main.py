"""FastAPI 애플리케이션 진입점."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.cors import CORSMiddleware

from app.api import geocode, naver_proxy, recommend
from app.core.config import get_settings
from app.core.logger import get_logger
from app.core.logging_config import configure_logging
from app.schemas.proxy import HealthResponse

configure_logging()
logger = get_logger(__name__)
settings = get_settings()

DEVELOPMENT_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _resolve_docs_mode(mode: str) -> str:
    normalized = (mode or "").strip().lower()
    if normalized in {"disabled", "public"}:
        return normalized
    logger.warning("유효하지 않은 DOCS_MODE 값입니다. disabled로 대체합니다: %s", mode)
    return "disabled"


def _resolve_cors_origins() -> list[str]:
    """명시된 허용 출처가 없으면 운영은 전체 허용, 개발은 로컬 개발 서버만 허용합니다."""
    origins = _split_csv(settings.CORS_ALLOW_ORIGINS)
    if origins:
        return origins
    return ["*"] if settings.is_production else list(DEVELOPMENT_ORIGINS)


def _configure_cors(app_: FastAPI) -> None:
    origins = _resolve_cors_origins()
    allow_methods = _split_csv(settings.CORS_ALLOW_METHODS) or ["GET"]
    allow_headers = _split_csv(settings.CORS_ALLOW_HEADERS) or ["Authorization", "Content-Type"]
    allow_credentials = settings.CORS_ALLOW_CREDENTIALS

    if "*" in origins and allow_credentials:
        logger.warning("허용 출처가 '*'이므로 allow_credentials를 false로 강제합니다.")
        allow_credentials = False

    app_.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=allow_methods,
        allow_headers=allow_headers,
    )


docs_mode = _resolve_docs_mode(settings.DOCS_MODE)

app = FastAPI(
    title="LunchHunt API",
    docs_url="/docs" if docs_mode == "public" else None,
    redoc_url="/redoc" if docs_mode == "public" else None,
    openapi_url="/openapi.json" if docs_mode == "public" else None,
)

_configure_cors(app)

app.include_router(naver_proxy.router)
app.include_router(recommend.router)
app.include_router(geocode.router)


@app.middleware("http")
async def add_security_headers(request: Request, call_next) -> Response:
    """기본 보안 헤더를 응답에 추가합니다."""
    response = await call_next(request)
    if not settings.SECURITY_HEADERS_ENABLED:
        return response

    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Permissions-Policy", "geolocation=(self), microphone=(), camera=()")
    response.headers.setdefault("Cache-Control", "no-store")
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외를 표준 형식으로 처리합니다."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    message = str(exc) if settings.EXPOSE_INTERNAL_ERRORS else "내부 서버 오류가 발생했습니다."
    return JSONResponse(status_code=500, content={"detail": message})


@app.get("/api/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """헬스 체크 엔드포인트."""
    return HealthResponse.now(settings.APP_ENV)
