"""퀴즈 응답 기반 맛집 추천 오케스트레이터."""

from __future__ import annotations

import hashlib
import random
import time
from collections.abc import Callable

from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.region_centroids import RegionCentroidTable, get_region_centroids
from app.graph.recommendation.workflow import compiled_recommendation_graph
from app.schemas.recommend import Answer, FoodRecommendation, UserLocation
from app.services.naver_map_service import NaverMapService
from app.services.personalization_service import LlmPersonalizationService, PersonalizationProvider
from app.services.places_service import PlaceSearchProvider
from app.services.recommend_builder import build_quiz_context, rank_recommendations, synthesize_recommendations

logger = get_logger(__name__)

CAPABILITY_SEARCH = "search"
CAPABILITY_PERSONALIZE = "personalize"


def _build_request_rng() -> random.Random:
    """요청마다 다른 추천을 유도하기 위한 난수 생성기를 만든다."""
    seed_source = f"{time.time_ns()}-{random.getrandbits(64)}"
    seed_hex = hashlib.sha256(seed_source.encode("utf-8")).hexdigest()[:16]
    return random.Random(int(seed_hex, 16))


def parse_capabilities(raw: str) -> set[str]:
    """`search,personalize` 형식 설정값을 소문자 집합으로 변환합니다."""
    return {item.strip().lower() for item in (raw or "").split(",") if item.strip()}


class FoodRecommender:
    """검색/개인화 제공자를 묶어 추천 그래프를 실행합니다.

    어떤 단계가 실패해도 예외를 던지지 않고 템플릿 추천으로 대체합니다.
    """

    def __init__(
        self,
        search_provider: PlaceSearchProvider | None = None,
        personalizer: PersonalizationProvider | None = None,
        *,
        centroids: RegionCentroidTable | None = None,
        rng_factory: Callable[[], random.Random] = _build_request_rng,
    ) -> None:
        self.search_provider = search_provider
        self.personalizer = personalizer
        self._centroids = centroids
        self._rng_factory = rng_factory

    @property
    def centroids(self) -> RegionCentroidTable:
        return self._centroids or get_region_centroids()

    async def generate_recommendations(
        self,
        answers: list[Answer],
        location: UserLocation | None = None,
    ) -> list[FoodRecommendation]:
        """퀴즈 응답과 위치로 최대 3개의 맛집 추천을 생성합니다."""
        rng = self._rng_factory()
        config = {
            "configurable": {
                "search_provider": self.search_provider,
                "personalizer": self.personalizer,
                "centroids": self.centroids,
                "rng": rng,
            }
        }
        try:
            result = await compiled_recommendation_graph.ainvoke(
                {"answers": answers, "location": location},
                config=config,
            )
            recommendations = result.get("recommendations") or []
            if recommendations:
                logger.info(
                    "Recommendations generated: source=%s count=%d",
                    result.get("source"),
                    len(recommendations),
                )
                return recommendations
            logger.warning("Recommendation graph returned no items; using fallback")
        except Exception:
            logger.exception("Recommendation graph failed; using fallback")

        context = build_quiz_context(answers, location, self.centroids)
        return rank_recommendations(synthesize_recommendations(context, rng), context, rng)


def build_food_recommender(settings: Settings | None = None) -> FoodRecommender:
    """설정된 capability 중 자격 증명이 있는 것만 활성화해 추천기를 만듭니다."""
    resolved_settings = settings or get_settings()
    capabilities = parse_capabilities(resolved_settings.RECOMMENDER_CAPABILITIES)

    search_provider: PlaceSearchProvider | None = None
    if CAPABILITY_SEARCH in capabilities:
        if resolved_settings.naver_credentials_configured:
            search_provider = NaverMapService.from_settings(resolved_settings)
        else:
            logger.warning("Search capability requested but Naver credentials are missing.")

    personalizer: PersonalizationProvider | None = None
    if CAPABILITY_PERSONALIZE in capabilities:
        if resolved_settings.OPENAI_API_KEY:
            personalizer = LlmPersonalizationService(resolved_settings)
        else:
            logger.warning("Personalize capability requested but OPENAI_API_KEY is missing.")

    logger.info(
        "Food recommender built: search=%s personalize=%s",
        type(search_provider).__name__ if search_provider else None,
        type(personalizer).__name__ if personalizer else None,
    )
    return FoodRecommender(search_provider=search_provider, personalizer=personalizer)
