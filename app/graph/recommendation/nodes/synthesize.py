"""템플릿 기반 대체 추천 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_rng
from app.services.recommend_builder import synthesize_recommendations

logger = get_logger(__name__)


def synthesize(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """검색과 AI 추천이 모두 불가할 때 템플릿 추천 3건을 만듭니다."""
    logger.info("Synthesizing fallback recommendations: reason=%s", state.get("parse_failure"))
    return {
        "recommendations": synthesize_recommendations(state["context"], get_rng(config)),
        "source": "fallback",
    }
