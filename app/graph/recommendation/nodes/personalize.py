"""검색 결과 개인화 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_personalizer, get_rng
from app.services.personalization_service import Parsed
from app.services.recommend_builder import build_from_places as build_place_recommendations

logger = get_logger(__name__)


async def personalize(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """AI로 장소별 추천 이유를 생성합니다. 실패하면 템플릿 문구로 대체됩니다."""
    personalizer = get_personalizer(config)
    if personalizer is None:
        return {"ai_items": [], "parse_failure": "personalize capability disabled"}

    result = await personalizer.personalize(state.get("places", []), state["context"])
    if isinstance(result, Parsed):
        return {"ai_items": result.items, "parse_failure": None}

    logger.warning("Personalization unavailable, using template reasons: %s", result.reason)
    return {"ai_items": [], "parse_failure": result.reason}


def build_from_places(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """검색 결과와 AI 문구로 추천 후보를 만듭니다."""
    recommendations = build_place_recommendations(
        state.get("places", []),
        state.get("ai_items", []),
        state["context"],
        get_rng(config),
    )
    return {"recommendations": recommendations, "source": "places"}
