"""좌표 → 주소/지역 변환 API."""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_centroid_table, get_geocoder
from app.core.region_centroids import RegionCentroidTable
from app.schemas.proxy import RegionEstimateResponse, ReverseGeocodeResponse
from app.services.naver_map_service import NaverMapService

router = APIRouter(prefix="/api/geocode", tags=["geocode"])


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90, description="위도"),
    lng: float = Query(..., ge=-180, le=180, description="경도"),
    geocoder: NaverMapService = Depends(get_geocoder),
) -> ReverseGeocodeResponse:
    """네이버 역지오코딩으로 주소를 조회합니다. 실패하면 지역 추정값을 반환합니다."""
    address = await geocoder.reverse_geocode(lat, lng)
    return ReverseGeocodeResponse(address=address, latitude=lat, longitude=lng)


@router.get("/regions/nearest", response_model=RegionEstimateResponse)
def nearest_region(
    lat: float = Query(..., ge=-90, le=90, description="위도"),
    lng: float = Query(..., ge=-180, le=180, description="경도"),
    centroids: RegionCentroidTable = Depends(get_centroid_table),
) -> RegionEstimateResponse:
    """외부 호출 없이 지역 중심점 테이블로 지역을 추정합니다."""
    region = centroids.nearest(lat, lng)
    if region is None:
        return RegionEstimateResponse(name=centroids.default_name, area=centroids.default_area, matched=False)
    return RegionEstimateResponse(name=region.name, area=region.area, matched=True)
