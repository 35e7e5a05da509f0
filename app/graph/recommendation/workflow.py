"""맛집 추천 그래프 워크플로우 구성."""

from langgraph.graph import END, StateGraph

from app.graph.recommendation.nodes import (
    build_from_places,
    discover,
    enrich_photos,
    finalize,
    personalize,
    prepare_context,
    route_after_discover,
    route_after_search,
    search_places,
    synthesize,
)
from app.graph.recommendation.state import RecommendState


def _create_workflow() -> StateGraph:
    """맛집 추천 그래프 워크플로우를 생성합니다."""
    workflow = StateGraph(RecommendState)

    workflow.add_node("prepare_context", prepare_context)
    workflow.add_node("search_places", search_places)
    workflow.add_node("enrich_photos", enrich_photos)
    workflow.add_node("personalize", personalize)
    workflow.add_node("build_from_places", build_from_places)
    workflow.add_node("discover", discover)
    workflow.add_node("synthesize", synthesize)
    workflow.add_node("finalize", finalize)

    workflow.set_entry_point("prepare_context")
    workflow.add_edge("prepare_context", "search_places")
    workflow.add_conditional_edges(
        "search_places",
        route_after_search,
        {"enrich_photos": "enrich_photos", "discover": "discover"},
    )
    workflow.add_edge("enrich_photos", "personalize")
    workflow.add_edge("personalize", "build_from_places")
    workflow.add_edge("build_from_places", "finalize")
    workflow.add_conditional_edges(
        "discover",
        route_after_discover,
        {"finalize": "finalize", "synthesize": "synthesize"},
    )
    workflow.add_edge("synthesize", "finalize")
    workflow.add_edge("finalize", END)

    return workflow


compiled_recommendation_graph = _create_workflow().compile()
