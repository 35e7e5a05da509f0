"""API 의존성 모음."""

from functools import lru_cache

from app.core.config import get_settings
from app.core.region_centroids import RegionCentroidTable, get_region_centroids
from app.services.naver_map_service import NaverMapService, get_naver_map_service
from app.services.recommend_service import FoodRecommender, build_food_recommender


@lru_cache(maxsize=1)
def get_food_recommender() -> FoodRecommender:
    """설정 기반 추천기 싱글톤을 제공합니다."""
    return build_food_recommender(get_settings())


def get_geocoder() -> NaverMapService:
    """역지오코딩에 사용할 네이버 지도 서비스를 제공합니다."""
    return get_naver_map_service()


def get_centroid_table() -> RegionCentroidTable:
    """지역 중심점 테이블을 제공합니다."""
    return get_region_centroids()
