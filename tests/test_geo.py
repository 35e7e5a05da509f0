"""지리 유틸리티 테스트."""

import re

import pytest

from app.core.geo import (
    decode_naver_coordinate,
    format_distance_km,
    haversine_km,
    is_valid_coordinate,
    offset_point,
    parse_distance_km,
)

CITY_HALL = (37.5665, 126.9780)
GANGNAM = (37.5173, 127.0473)


def test_haversine_between_city_hall_and_gangnam() -> None:
    distance = haversine_km(*CITY_HALL, *GANGNAM)

    assert 8.0 <= distance <= 8.4


def test_haversine_is_symmetric_and_zero_for_same_point() -> None:
    assert haversine_km(*CITY_HALL, *CITY_HALL) == 0.0
    assert haversine_km(*CITY_HALL, *GANGNAM) == pytest.approx(haversine_km(*GANGNAM, *CITY_HALL))


def test_manual_location_origin_is_not_a_coordinate() -> None:
    assert is_valid_coordinate(0.0, 0.0) is False
    assert is_valid_coordinate(None, 127.0) is False
    assert is_valid_coordinate(91.0, 127.0) is False
    assert is_valid_coordinate(*GANGNAM) is True


def test_decode_naver_coordinate_uses_fixed_point_scale() -> None:
    assert decode_naver_coordinate("1269780000") == pytest.approx(126.978)
    assert decode_naver_coordinate(375665000) == pytest.approx(37.5665)
    assert decode_naver_coordinate("") is None
    assert decode_naver_coordinate("abc") is None


def test_offset_point_lands_at_requested_distance() -> None:
    latitude, longitude = offset_point(*CITY_HALL, 1.5, 45.0)

    assert haversine_km(*CITY_HALL, latitude, longitude) == pytest.approx(1.5, abs=1e-6)


def test_distance_format_round_trip() -> None:
    formatted = format_distance_km(1.234)

    assert formatted == "1.2km"
    assert re.fullmatch(r"\d+(\.\d+)?km", formatted)
    assert parse_distance_km(formatted) == pytest.approx(1.2)
    assert parse_distance_km("위치 확인 필요") is None
