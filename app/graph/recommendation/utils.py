"""추천 그래프 공통 유틸리티."""

import random
from typing import Any

from langchain_core.runnables import RunnableConfig

from app.core.region_centroids import RegionCentroidTable, get_region_centroids
from app.services.personalization_service import PersonalizationProvider
from app.services.places_service import PlaceSearchProvider


def _configurable(config: RunnableConfig | None) -> dict[str, Any]:
    return (config or {}).get("configurable", {}) or {}


def get_rng(config: RunnableConfig | None) -> random.Random:
    """요청 단위 난수 생성기. 주입되지 않았으면 새로 만듭니다."""
    rng = _configurable(config).get("rng")
    return rng if isinstance(rng, random.Random) else random.Random()


def get_search_provider(config: RunnableConfig | None) -> PlaceSearchProvider | None:
    return _configurable(config).get("search_provider")


def get_personalizer(config: RunnableConfig | None) -> PersonalizationProvider | None:
    return _configurable(config).get("personalizer")


def get_centroids(config: RunnableConfig | None) -> RegionCentroidTable:
    return _configurable(config).get("centroids") or get_region_centroids()
