import asyncio
import random

from app.core.region_centroids import DEFAULT_CENTROIDS_PATH, load_region_centroids
from app.graph.recommendation.workflow import compiled_recommendation_graph
from app.schemas.recommend import Answer


def test_graph_invocation():
    """추천 LangGraph 객체의 호출을 검증하는 스모크 테스트.

    검색/개인화 제공자가 모두 비활성화된 상태에서도 그래프가 에러 없이
    실행되어 템플릿 추천을 반환하는지 확인합니다.

    주요 검증 항목:
    - `ainvoke` 반환값이 딕셔너리(dict) 타입이어야 합니다.
    - 반환된 딕셔너리에 'recommendations' 키가 포함되어야 합니다.
    - 추천 출처는 'fallback'이어야 합니다.
    """
    # 1. 테스트 입력 데이터
    test_input = {"answers": [Answer(question_id="foodType", value="분식")], "location": None}
    config = {
        "configurable": {
            "centroids": load_region_centroids(DEFAULT_CENTROIDS_PATH),
            "rng": random.Random(7),
        }
    }

    # 2. 실행 (Invoke)
    result = asyncio.run(compiled_recommendation_graph.ainvoke(test_input, config=config))

    # 3. 검증 (Assertion)
    assert isinstance(result, dict), "결과는 딕셔너리(dict) 형태여야 합니다."
    assert "recommendations" in result, "결과에 'recommendations' 키가 있어야 합니다."
    assert result["source"] == "fallback"
    assert 1 <= len(result["recommendations"]) <= 3
