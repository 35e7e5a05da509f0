"""맛집 추천 오케스트레이터 테스트."""

from __future__ import annotations

import asyncio
import random
import re

import pytest

from app.core.config import Settings
from app.core.geo import format_distance_km, haversine_km
from app.core.region_centroids import DEFAULT_CENTROIDS_PATH, load_region_centroids
from app.schemas.recommend import Answer, UserLocation
from app.services.naver_map_service import NaverMapService
from app.services.personalization_service import AiRestaurant, LlmPersonalizationService, ParseFailure, Parsed
from app.services.recommend_service import FoodRecommender, build_food_recommender
from tests.mocks.mock_places_service import MockPersonalizer, MockPlaceSearchProvider

DISTANCE_PATTERN = re.compile(r"\d+(\.\d+)?km")
CITY_HALL = UserLocation(latitude=37.5665, longitude=126.9780)


class _FixedRandom(random.Random):
    """uniform/random 값을 고정한 난수 생성기."""

    def __init__(self, uniform_value: float = 2.5, random_value: float = 0.0) -> None:
        super().__init__(0)
        self.uniform_value = uniform_value
        self.random_value = random_value

    def random(self) -> float:
        return self.random_value

    def uniform(self, a: float, b: float) -> float:
        return min(max(self.uniform_value, a), b)


def _answers(mood: str = "피곤해요", food_type: str = "한식", budget: str = "1만원") -> list[Answer]:
    return [
        Answer(question_id="mood", value=mood),
        Answer(question_id="foodType", value=food_type),
        Answer(question_id="budget", value=budget),
    ]


def _recommender(search=None, personalizer=None, rng: random.Random | None = None) -> FoodRecommender:
    return FoodRecommender(
        search_provider=search,
        personalizer=personalizer,
        centroids=load_region_centroids(DEFAULT_CENTROIDS_PATH),
        rng_factory=lambda: rng or random.Random(42),
    )


def _assert_well_formed(recommendations) -> None:
    assert 1 <= len(recommendations) <= 3
    for item in recommendations:
        assert item.name.strip()
        assert item.reason.strip()
        assert item.rating
        assert DISTANCE_PATTERN.fullmatch(item.distance)


def test_search_results_are_personalized_and_ranked() -> None:
    search = MockPlaceSearchProvider(photos={"을지로 김치찌개": "https://img.example.com/kimchi.jpg"})
    personalizer = MockPersonalizer(
        personalize_result=Parsed(
            [AiRestaurant(name="을지로 김치찌개", reason="피곤한 날엔 얼큰한 김치찌개!", food_type="김치찌개")]
        )
    )

    recommendations = asyncio.run(
        _recommender(search, personalizer).generate_recommendations(_answers(), CITY_HALL)
    )

    _assert_well_formed(recommendations)
    assert len(recommendations) == 3
    by_name = {item.name: item for item in recommendations}
    assert by_name["을지로 김치찌개"].reason == "피곤한 날엔 얼큰한 김치찌개!"
    assert by_name["을지로 김치찌개"].image_url == "https://img.example.com/kimchi.jpg"
    assert by_name["을지로 김치찌개"].price == "8,000-12,000원"
    assert by_name["명동 비빔밥 명가"].reason
    assert all(item.map_url and item.map_url.startswith("https://map.naver.com/v5/search/") for item in recommendations)
    assert search.search_calls[0]["query"] == "한식 맛집"
    assert personalizer.discover_calls == []


def test_location_text_prefers_address_then_coordinates() -> None:
    search = MockPlaceSearchProvider()

    asyncio.run(
        _recommender(search).generate_recommendations(_answers(), UserLocation(address="서울 마포구 합정동"))
    )
    asyncio.run(
        _recommender(search).generate_recommendations(_answers(), UserLocation(latitude=37.5173, longitude=127.0473))
    )
    asyncio.run(_recommender(search).generate_recommendations(_answers(), None))

    assert [call["location_hint"] for call in search.search_calls] == ["서울 마포구 합정동", "강남구", "서울"]


def test_distance_uses_haversine_when_coordinates_match() -> None:
    place = {
        "id": "p1",
        "name": "을지로 김치찌개",
        "address": "서울특별시 중구",
        "latitude": 37.5660,
        "longitude": 126.9910,
    }
    no_coordinates = {"id": "p2", "name": "좌표 없는 식당", "address": "서울특별시 중구"}
    search = MockPlaceSearchProvider(places=[place, no_coordinates])

    recommendations = asyncio.run(
        _recommender(search, rng=_FixedRandom()).generate_recommendations(_answers(), CITY_HALL)
    )
    by_name = {item.name: item for item in recommendations}

    expected = format_distance_km(haversine_km(37.5665, 126.9780, 37.5660, 126.9910))
    assert by_name["을지로 김치찌개"].distance == expected
    assert by_name["을지로 김치찌개"].distance != "2.5km"
    assert by_name["을지로 김치찌개"].is_distance_estimated is False
    assert by_name["을지로 김치찌개"].directions_url.startswith("https://map.naver.com/v5/directions/126.978,37.5665,,/")
    assert by_name["좌표 없는 식당"].distance == "2.5km"
    assert by_name["좌표 없는 식당"].is_distance_estimated is True
    assert by_name["좌표 없는 식당"].directions_url is None


def test_manual_location_without_coordinates_uses_placeholder_distance() -> None:
    search = MockPlaceSearchProvider()
    manual = UserLocation(latitude=0.0, longitude=0.0, address="서울 종로구")

    recommendations = asyncio.run(
        _recommender(search, rng=_FixedRandom(uniform_value=1.2)).generate_recommendations(_answers(), manual)
    )

    _assert_well_formed(recommendations)
    assert all(item.distance == "1.2km" and item.is_distance_estimated for item in recommendations)


def test_names_differing_only_by_case_collapse() -> None:
    places = [
        {"id": "a", "name": "Kimchi House", "address": "서울"},
        {"id": "b", "name": "KIMCHI house", "address": "서울"},
        {"id": "c", "name": "Bibim Table", "address": "서울"},
    ]
    search = MockPlaceSearchProvider(places=places)

    recommendations = asyncio.run(_recommender(search).generate_recommendations(_answers(), None))

    assert sorted(item.name.lower() for item in recommendations) == ["bibim table", "kimchi house"]


def test_no_search_results_use_ai_discovery() -> None:
    search = MockPlaceSearchProvider(places=[])
    personalizer = MockPersonalizer(
        discover_result=Parsed(
            [
                AiRestaurant(
                    name="광화문 국밥",
                    reason="따뜻한 국밥 한 그릇",
                    location="서울 종로구 세종대로",
                    rating=4.4,
                    latitude=37.5720,
                    longitude=126.9769,
                )
            ]
        )
    )

    recommendations = asyncio.run(
        _recommender(search, personalizer).generate_recommendations(_answers(), CITY_HALL)
    )

    _assert_well_formed(recommendations)
    assert [item.name for item in recommendations] == ["광화문 국밥"]
    assert recommendations[0].rating == "4.4/5.0"
    assert recommendations[0].is_distance_estimated is False
    assert len(personalizer.discover_calls) == 1
    assert personalizer.personalize_calls == []


def test_discovery_parse_failure_synthesizes_offsets_near_user() -> None:
    search = MockPlaceSearchProvider(places=[])
    personalizer = MockPersonalizer(discover_result=ParseFailure("JSON array not found"))

    recommendations = asyncio.run(
        _recommender(search, personalizer).generate_recommendations(_answers(), CITY_HALL)
    )

    _assert_well_formed(recommendations)
    assert len(recommendations) == 3
    assert {item.name for item in recommendations} == {"AI 추천 한식 맛집", "스마트 추천 한식 전문점", "개인화 한식 추천"}
    for item in recommendations:
        offset = haversine_km(CITY_HALL.latitude, CITY_HALL.longitude, item.latitude, item.longitude)
        assert 0.5 - 1e-6 <= offset <= 3.0 + 1e-6
        assert item.is_distance_estimated is True


def test_without_providers_synthesized_results_are_returned() -> None:
    recommendations = asyncio.run(_recommender().generate_recommendations([], None))

    _assert_well_formed(recommendations)
    assert len(recommendations) == 3
    assert all(item.price == "가격 문의" for item in recommendations)
    assert {item.name for item in recommendations} == {"AI 추천 오늘의 맛집", "스마트 추천 오늘의 전문점", "개인화 오늘의 추천"}


def test_search_provider_error_counts_as_zero_results() -> None:
    search = MockPlaceSearchProvider(error=RuntimeError("quota exceeded"))
    personalizer = MockPersonalizer(discover_result=ParseFailure("no valid items"))

    recommendations = asyncio.run(
        _recommender(search, personalizer).generate_recommendations(_answers(), None)
    )

    _assert_well_formed(recommendations)
    assert len(personalizer.discover_calls) == 1


def test_unexpected_graph_error_falls_back_to_synthesized_results() -> None:
    class _BrokenPersonalizer(MockPersonalizer):
        async def personalize(self, places, context):
            raise RuntimeError("boom")

    recommendations = asyncio.run(
        _recommender(MockPlaceSearchProvider(), _BrokenPersonalizer()).generate_recommendations(_answers(), None)
    )

    _assert_well_formed(recommendations)
    assert len(recommendations) == 3
    assert all("추천" in item.name for item in recommendations)


@pytest.mark.parametrize(
    "answers",
    [
        [],
        _answers(mood="", food_type="", budget=""),
        _answers(mood="스트레스 받아요", food_type="중식", budget="상관없음"),
        _answers(mood="설레요", food_type="양식", budget="5만원"),
    ],
)
def test_every_answer_set_yields_one_to_three_items(answers) -> None:
    recommendations = asyncio.run(
        _recommender(MockPlaceSearchProvider(), MockPersonalizer()).generate_recommendations(answers, CITY_HALL)
    )

    _assert_well_formed(recommendations)


def test_build_food_recommender_respects_capabilities(monkeypatch) -> None:
    for key in ("NAVER_CLIENT_ID", "NAVER_CLIENT_SECRET", "VITE_NAVER_CLIENT_ID", "VITE_NAVER_CLIENT_SECRET"):
        monkeypatch.delenv(key, raising=False)

    full = build_food_recommender(
        Settings(NAVER_CLIENT_ID="id", NAVER_CLIENT_SECRET="secret", OPENAI_API_KEY="test-key")
    )
    search_only = build_food_recommender(
        Settings(
            NAVER_CLIENT_ID="id",
            NAVER_CLIENT_SECRET="secret",
            OPENAI_API_KEY="test-key",
            RECOMMENDER_CAPABILITIES="search",
        )
    )
    missing_credentials = build_food_recommender(Settings(OPENAI_API_KEY=None))

    assert isinstance(full.search_provider, NaverMapService)
    assert isinstance(full.personalizer, LlmPersonalizationService)
    assert isinstance(search_only.search_provider, NaverMapService)
    assert search_only.personalizer is None
    assert missing_credentials.search_provider is None
    assert missing_credentials.personalizer is None
