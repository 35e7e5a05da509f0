"""네이버 검색 / AI 개인화 Mock 서비스.

실제 API 호출 없이 미리 정의된 장소와 AI 응답을 반환한다.
"""

from __future__ import annotations

import asyncio

from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import QuizContext, UserLocation
from app.services.personalization_service import ParseFailure, ParseResult, PersonalizationProvider
from app.services.places_service import PlaceSearchProvider

SAMPLE_PLACES: list[dict] = [
    {
        "id": "https://example.com/kimchi",
        "name": "을지로 김치찌개",
        "address": "서울특별시 중구 을지로동 1",
        "road_address": "서울특별시 중구 을지로 100",
        "phone": "02-123-4567",
        "rating": 4.6,
        "category": "한식>찌개,전골",
        "link": "https://example.com/kimchi",
        "latitude": 37.5660,
        "longitude": 126.9910,
    },
    {
        "id": "https://example.com/bibimbap",
        "name": "명동 비빔밥 명가",
        "address": "서울특별시 중구 명동2가 2",
        "road_address": "서울특별시 중구 명동길 20",
        "category": "한식>비빔밥",
        "latitude": 37.5637,
        "longitude": 126.9838,
    },
    {
        "id": "https://example.com/bulgogi",
        "name": "종로 불고기 식당",
        "address": "서울특별시 종로구 관철동 3",
        "category": "한식>육류,고기요리",
        "latitude": None,
        "longitude": None,
    },
]


class MockPlaceSearchProvider(PlaceSearchProvider):
    """호출 인자를 기록하고 샘플 장소를 반환하는 검색 제공자."""

    def __init__(
        self,
        places: list[dict] | None = None,
        photos: dict[str, str] | None = None,
        error: Exception | None = None,
        photo_delays: dict[str, float] | None = None,
    ) -> None:
        self._places = SAMPLE_PLACES if places is None else places
        self._photos = photos or {}
        self._error = error
        self._photo_delays = photo_delays or {}
        self.photo_completions: list[str] = []
        self.search_calls: list[dict] = []
        self.photo_calls: list[tuple[str, str | None]] = []

    async def search_places(
        self,
        query: str,
        location_hint: str | None = None,
        user_location: UserLocation | None = None,
        include_photos: bool = True,
    ) -> list[PlaceSearchResult]:
        self.search_calls.append(
            {
                "query": query,
                "location_hint": location_hint,
                "user_location": user_location,
                "include_photos": include_photos,
            }
        )
        if self._error is not None:
            raise self._error
        return [PlaceSearchResult(**place) for place in self._places[: self.MAX_RESULTS]]

    async def find_main_photo(self, name: str, location: str | None = None) -> str | None:
        self.photo_calls.append((name, location))
        delay = self._photo_delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        self.photo_completions.append(name)
        return self._photos.get(name)


class MockPersonalizer(PersonalizationProvider):
    """고정된 파싱 결과를 반환하는 개인화 제공자."""

    def __init__(
        self,
        personalize_result: ParseResult | None = None,
        discover_result: ParseResult | None = None,
    ) -> None:
        self._personalize_result = personalize_result or ParseFailure("not configured")
        self._discover_result = discover_result or ParseFailure("not configured")
        self.personalize_calls: list[tuple[list[PlaceSearchResult], QuizContext]] = []
        self.discover_calls: list[QuizContext] = []

    async def personalize(self, places: list[PlaceSearchResult], context: QuizContext) -> ParseResult:
        self.personalize_calls.append((places, context))
        return self._personalize_result

    async def discover(self, context: QuizContext) -> ParseResult:
        self.discover_calls.append(context)
        return self._discover_result
