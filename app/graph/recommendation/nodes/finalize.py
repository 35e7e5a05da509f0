"""추천 결과 정리 노드."""

from typing import Any

from langchain_core.runnables import RunnableConfig

from app.graph.recommendation.state import RecommendState
from app.graph.recommendation.utils import get_rng
from app.services.recommend_builder import rank_recommendations


def finalize(state: RecommendState, config: RunnableConfig) -> dict[str, Any]:
    """중복 제거, 점수 정렬, 상위 3개 선택 후 지도 링크를 붙입니다."""
    ranked = rank_recommendations(state.get("recommendations", []), state["context"], get_rng(config))
    return {"recommendations": ranked}
