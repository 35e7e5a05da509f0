"""맛집 추천 그래프 상태 정의."""

from typing import Literal, TypedDict

from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import Answer, FoodRecommendation, QuizContext, UserLocation
from app.services.personalization_service import AiRestaurant

RecommendationSource = Literal["places", "ai", "fallback"]


class RecommendState(TypedDict, total=False):
    """맛집 추천 `LangGraph` 워크플로우 상태.

    Keys:
        `answers`: 퀴즈 응답 목록
        `location`: 사용자 위치
        `context`: 응답/위치를 정리한 추천 컨텍스트
        `places`: 네이버 로컬 검색 결과
        `ai_items`: AI가 생성한 추천 문구/맛집 목록
        `parse_failure`: AI 응답 파싱 실패 사유
        `recommendations`: 정렬 전 추천 후보 또는 최종 결과
        `source`: 최종 추천의 출처
    """

    answers: list[Answer]
    location: UserLocation | None
    context: QuizContext
    places: list[PlaceSearchResult]
    ai_items: list[AiRestaurant]
    parse_failure: str | None
    recommendations: list[FoodRecommendation]
    source: RecommendationSource
