"""거리 계산과 좌표 변환을 위한 지리 유틸리티."""

from __future__ import annotations

import math

_EARTH_RADIUS_KM = 6371.0
_NAVER_COORDINATE_SCALE = 10_000_000
_MIN_LAT = -90.0
_MAX_LAT = 90.0
_MIN_LNG = -180.0
_MAX_LNG = 180.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """두 위경도 지점 사이의 대권 거리(km)를 반환합니다."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return _EARTH_RADIUS_KM * c


def is_valid_coordinate(latitude: float | None, longitude: float | None) -> bool:
    """실제 측위 좌표로 쓸 수 있는 값인지 판별합니다.

    수동 입력 위치는 (0, 0)으로 전달되므로 좌표가 없는 것으로 취급합니다.
    """
    if latitude is None or longitude is None:
        return False
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    if lat == 0.0 and lng == 0.0:
        return False
    return _MIN_LAT <= lat <= _MAX_LAT and _MIN_LNG <= lng <= _MAX_LNG


def decode_naver_coordinate(raw: object) -> float | None:
    """네이버 로컬 검색의 고정소수점 좌표(mapx/mapy, 1e7 배율)를 도 단위로 변환합니다."""
    if raw is None or raw == "":
        return None
    try:
        return float(raw) / _NAVER_COORDINATE_SCALE
    except (TypeError, ValueError):
        return None


def offset_point(latitude: float, longitude: float, distance_km: float, bearing_deg: float) -> tuple[float, float]:
    """기준점에서 방위각 방향으로 distance_km 떨어진 좌표를 반환합니다."""
    angular = distance_km / _EARTH_RADIUS_KM
    bearing = math.radians(bearing_deg)
    lat1 = math.radians(latitude)
    lng1 = math.radians(longitude)

    lat2 = math.asin(math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing))
    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return math.degrees(lat2), (math.degrees(lng2) + 540.0) % 360.0 - 180.0


def format_distance_km(distance_km: float) -> str:
    """거리를 `1.2km` 형식 문자열로 변환합니다."""
    return f"{max(0.0, distance_km):.1f}km"


def parse_distance_km(text: str | None) -> float | None:
    """`1.2km` 형식 문자열에서 거리 값을 읽습니다. 형식이 다르면 None입니다."""
    if not text or not text.endswith("km"):
        return None
    try:
        return float(text[:-2])
    except ValueError:
        return None
