"""네이버 지도 검색/길찾기 링크 생성."""

from urllib.parse import quote

from app.core.geo import is_valid_coordinate

NAVER_MAP_BASE_URL = "https://map.naver.com/v5"


def _has_coordinates(latitude: float | None, longitude: float | None) -> bool:
    return latitude is not None and longitude is not None and is_valid_coordinate(latitude, longitude)


def build_search_url(
    name: str,
    latitude: float | None = None,
    longitude: float | None = None,
    address: str | None = None,
) -> str:
    """음식점 검색 링크. 좌표 > 주소+이름 > 이름 순으로 사용합니다."""
    encoded_name = quote(name)
    if _has_coordinates(latitude, longitude):
        return f"{NAVER_MAP_BASE_URL}/search/{encoded_name}?c={longitude},{latitude},15,0,0,0,dh"
    if address and address.strip():
        return f"{NAVER_MAP_BASE_URL}/search/{quote(f'{address.strip()} {name}')}"
    return f"{NAVER_MAP_BASE_URL}/search/{encoded_name}"


def build_directions_url(
    name: str,
    latitude: float | None,
    longitude: float | None,
    user_latitude: float | None,
    user_longitude: float | None,
) -> str | None:
    """사용자 위치에서 음식점까지의 대중교통 길찾기 링크. 좌표가 없으면 None."""
    if not (_has_coordinates(latitude, longitude) and _has_coordinates(user_latitude, user_longitude)):
        return None
    return (
        f"{NAVER_MAP_BASE_URL}/directions/{user_longitude},{user_latitude},,"
        f"/{longitude},{latitude},{quote(name)},/-/transit"
        f"?c={longitude},{latitude},15,0,0,0,dh"
    )
