"""퀴즈 기반 맛집 추천 API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_food_recommender
from app.core.logger import get_logger
from app.schemas.recommend import RecommendRequest, RecommendResponse
from app.services.recommend_service import FoodRecommender

router = APIRouter(prefix="/api", tags=["recommend"])
logger = get_logger(__name__)


RECOMMEND_RESPONSE_EXAMPLES = {
    "places": {
        "summary": "실시간 검색 기반 추천",
        "value": {
            "recommendations": [
                {
                    "name": "을지로 김치찌개",
                    "reason": "피곤한 날에는 든든한 김치찌개 한 그릇이 최고예요.",
                    "location": "서울특별시 중구 을지로 123",
                    "price": "8,000-12,000원",
                    "rating": "4.5/5.0",
                    "distance": "0.8km",
                    "isDistanceEstimated": False,
                    "imageUrl": "https://example.com/kimchi.jpg",
                    "foodType": "김치찌개",
                    "mapUrl": "https://map.naver.com/v5/search/%EA%B9%80%EC%B9%98?c=126.99,37.566,15,0,0,0,dh",
                }
            ]
        },
    }
}


@router.post(
    "/recommendations",
    response_model=RecommendResponse,
    response_model_by_alias=True,
    responses={
        200: {
            "description": "최대 3개의 맛집 추천. 결과가 없으면 빈 목록",
            "content": {"application/json": {"examples": RECOMMEND_RESPONSE_EXAMPLES}},
        },
    },
)
async def recommend(
    request: RecommendRequest,
    recommender: FoodRecommender = Depends(get_food_recommender),
) -> RecommendResponse:
    """퀴즈 응답과 위치로 맛집을 추천합니다."""
    recommendations = await recommender.generate_recommendations(request.answers, request.location)
    logger.info("Recommend request served: count=%d", len(recommendations))
    return RecommendResponse(recommendations=recommendations)
