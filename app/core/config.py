"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    NAVER_CLIENT_ID: str = Field(
        default="",
        validation_alias=AliasChoices("NAVER_CLIENT_ID", "VITE_NAVER_CLIENT_ID"),
    )
    NAVER_CLIENT_SECRET: str = Field(
        default="",
        validation_alias=AliasChoices("NAVER_CLIENT_SECRET", "VITE_NAVER_CLIENT_SECRET"),
    )
    NAVER_RELAY_BASE_URL: str = ""
    NAVER_USER_AGENT: str = "Mozilla/5.0 (compatible; LunchHunt/1.0)"
    OPENAI_API_KEY: str | None = None
    LLM_MODEL_NAME: str = "gpt-4o-mini"
    ENABLE_STAGE_LLM_ROUTING: bool = False
    LLM_MODEL_QUALITY: str = ""
    LLM_MODEL_SPEED: str = ""
    LLM_MODEL_COST: str = ""
    RECOMMEND_LLM_TEMPERATURE: float = 0.7
    RECOMMENDER_CAPABILITIES: str = "search,personalize"
    REGION_CENTROIDS_PATH: str = ""
    REQUEST_TIMEOUT_SECONDS: int = 60
    LLM_TIMEOUT_SECONDS: int = 30
    NAVER_API_TIMEOUT_SECONDS: int = 10
    SEARCH_RADIUS_KM: float = 5.0
    APP_ENV: str = "development"
    DOCS_MODE: str = "public"
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGINS: str = ""
    CORS_ALLOW_METHODS: str = "GET,POST,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,Authorization,X-Naver-Client-Id,X-Naver-Client-Secret"
    CORS_ALLOW_CREDENTIALS: bool = True
    SECURITY_HEADERS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("SEARCH_RADIUS_KM", mode="before")
    @classmethod
    def _clamp_search_radius(cls, value: object) -> float:
        try:
            numeric = float(value) if value is not None else 5.0
        except (TypeError, ValueError):
            numeric = 5.0
        return min(50.0, max(0.1, numeric))

    @property
    def is_production(self) -> bool:
        """운영 모드 여부를 반환합니다."""
        return self.APP_ENV.strip().lower() == "production"

    @property
    def naver_credentials_configured(self) -> bool:
        """네이버 API 자격 증명이 모두 설정되었는지 반환합니다."""
        return bool(self.NAVER_CLIENT_ID and self.NAVER_CLIENT_SECRET)


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
