"""대표 사진 보강 노드."""

import asyncio
from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.logger import get_logger
from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_search_provider
from app.schemas.place import PlaceSearchResult
from app.services.places_service import PlaceSearchProvider

logger = get_logger(__name__)


async def _with_main_photo(provider: PlaceSearchProvider, place: PlaceSearchResult) -> PlaceSearchResult:
    if place.main_photo_url:
        return place
    try:
        photo_url = await provider.find_main_photo(place.name, place.road_address or place.address or None)
    except Exception:
        logger.warning("Photo lookup failed: name=%s", place.name, exc_info=True)
        return place
    return place.with_photo(photo_url) if photo_url else place


async def enrich_photos(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """사진이 없는 장소의 대표 사진을 동시에 조회합니다. 순서는 유지됩니다."""
    provider = get_search_provider(config)
    places = state.get("places", [])
    if provider is None or not places:
        return {"places": places}

    enriched = await asyncio.gather(*(_with_main_photo(provider, place) for place in places))
    logger.info(
        "Photos enriched: with_photo=%d/%d",
        sum(1 for place in enriched if place.main_photo_url),
        len(enriched),
    )
    return {"places": list(enriched)}
