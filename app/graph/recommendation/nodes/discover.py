"""AI 직접 추천 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_personalizer, get_rng
from app.services.personalization_service import ParseFailure
from app.services.recommend_builder import build_from_ai_items

logger = get_logger(__name__)


async def discover(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """검색 결과가 없을 때 AI에게 실제 맛집을 직접 추천받습니다."""
    personalizer = get_personalizer(config)
    if personalizer is None:
        return {"recommendations": [], "parse_failure": "personalize capability disabled"}

    result = await personalizer.discover(state["context"])
    if isinstance(result, ParseFailure):
        logger.warning("AI discovery failed: %s", result.reason)
        return {"recommendations": [], "parse_failure": result.reason}

    recommendations = build_from_ai_items(result.items, state["context"], get_rng(config))
    logger.info("AI discovery produced %d recommendations", len(recommendations))
    return {"recommendations": recommendations, "ai_items": result.items, "parse_failure": None, "source": "ai"}


def route_after_discover(state: RecommendState) -> str:
    return "finalize" if state.get("recommendations") else "synthesize"
