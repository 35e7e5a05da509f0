"""맛집 검색 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_search_provider

logger = get_logger(__name__)


async def search_places(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """검색 제공자로 실제 음식점을 찾습니다. 오류는 결과 0건으로 취급합니다."""
    provider = get_search_provider(config)
    context = state["context"]
    if provider is None:
        logger.info("Search capability disabled; skipping place search")
        return {"places": []}

    try:
        places = await provider.search_places(
            context.search_query,
            location_hint=context.location_text,
            user_location=context.user_location,
            include_photos=False,
        )
    except Exception:
        logger.exception("Place search failed: query=%s", context.search_query)
        places = []

    logger.info("Found %d places", len(places))
    return {"places": places}


def route_after_search(state: RecommendState) -> str:
    """검색 결과가 있으면 사진 보강, 없으면 AI 직접 추천으로 분기합니다."""
    return "enrich_photos" if state.get("places") else "discover"
