"""추천 컨텍스트 준비 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_centroids
from app.services.recommend_builder import build_quiz_context

logger = get_logger(__name__)


def prepare_context(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """퀴즈 응답에서 기분/음식/예산을 꺼내고 검색 지역명을 정합니다."""
    context = build_quiz_context(
        state.get("answers", []),
        state.get("location"),
        get_centroids(config),
    )
    logger.info(
        "Recommendation context prepared: mood=%s food_type=%s budget=%s location=%s",
        context.mood,
        context.food_type,
        context.budget,
        context.location_text,
    )
    return {"context": context}
