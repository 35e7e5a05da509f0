"""맛집 추천 그래프 노드 모음."""

from app.graph.recommendation.nodes.context import prepare_context
from app.graph.recommendation.nodes.discover import discover, route_after_discover
from app.graph.recommendation.nodes.enrich import enrich_photos
from app.graph.recommendation.nodes.finalize import finalize
from app.graph.recommendation.nodes.personalize import build_from_places, personalize
from app.graph.recommendation.nodes.search import route_after_search, search_places
from app.graph.recommendation.nodes.synthesize import synthesize

__all__ = [
    "prepare_context",
    "search_places",
    "route_after_search",
    "enrich_photos",
    "personalize",
    "build_from_places",
    "discover",
    "route_after_discover",
    "synthesize",
    "finalize",
]
