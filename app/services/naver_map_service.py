"""네이버 로컬 검색 / 이미지 검색 / 역지오코딩 서비스 구현."""

from __future__ import annotations

import asyncio
import re
from functools import lru_cache
from typing import Any

import requests

from app.core.config import Settings, get_settings
from app.core.geo import decode_naver_coordinate, haversine_km
from app.core.logger import get_logger
from app.core.region_centroids import RegionCentroidTable, get_region_centroids
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout
from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import UserLocation
from app.services.naver_relay import UPSTREAM_URLS, NaverRoute
from app.services.places_service import PlaceSearchProvider

logger = get_logger(__name__)

_HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


class NaverApiError(RuntimeError):
    """네이버 API가 비정상 응답을 반환했을 때 발생하는 예외."""


def clean_html_tags(text: str | None) -> str:
    """검색 결과 제목의 `<b>` 등 HTML 태그를 제거합니다."""
    return _HTML_TAG_PATTERN.sub("", text or "")


def is_valid_image_url(url: object) -> bool:
    """이미지 URL 최소 검증: 비어 있지 않고 http로 시작하며 점을 포함."""
    return isinstance(url, str) and bool(url) and url.startswith("http") and "." in url


def build_photo_queries(name: str, location: str | None = None) -> list[str]:
    """대표 사진 검색에 시도할 쿼리 목록을 우선순위 순서로 반환합니다."""
    clean_name = clean_html_tags(name).strip()
    queries = [clean_name, f"{clean_name} 음식점", f"{clean_name} 맛집", f"{clean_name} 음식"]
    if location:
        queries.append(f"{clean_name} {clean_html_tags(location).strip()}")
    return queries


def compose_reverse_geocode_address(result: dict[str, Any]) -> str | None:
    """역지오코딩 결과 한 건을 주소 문자열로 조합합니다.

    도로명 주소(`land.name`)가 있으면 `시도 시군구 도로명 건물번호`를,
    없으면 `시도 시군구 읍면동[ 리]` 지번 주소를 반환합니다.
    """
    region = result.get("region") or {}

    def _area(key: str) -> str:
        return str((region.get(key) or {}).get("name") or "").strip()

    land = result.get("land") or {}
    road_name = str(land.get("name") or "").strip()
    if road_name:
        address = f"{_area('area1')} {_area('area2')} {road_name}"
        if land.get("number1"):
            address += f" {land['number1']}"
        if land.get("number2"):
            address += f"-{land['number2']}"
        return address.strip()

    parts = [_area("area1"), _area("area2"), _area("area3")]
    jibun = " ".join(part for part in parts if part)
    if _area("area4"):
        jibun = f"{jibun} {_area('area4')}"
    return jibun or None


class NaverMapService(PlaceSearchProvider):
    """네이버 Open API 기반 장소 검색 서비스.

    `relay_base_url`이 주어지면 `/api/naver/v1` 릴레이를 거쳐 호출하고,
    없으면 업스트림 API를 직접 호출합니다.
    """

    _LOCAL_SEARCH_DISPLAY = 20
    _IMAGE_SEARCH_DISPLAY = 10

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        relay_base_url: str | None = None,
        user_agent: str = "Mozilla/5.0 (compatible; LunchHunt/1.0)",
        timeout_seconds: int = 10,
        search_radius_km: float = 5.0,
        centroids: RegionCentroidTable | None = None,
    ) -> None:
        self._headers = {
            "X-Naver-Client-Id": client_id,
            "X-Naver-Client-Secret": client_secret,
            "User-Agent": user_agent,
        }
        self._relay_base_url = relay_base_url.rstrip("/") if relay_base_url else None
        self._timeout_seconds = timeout_seconds
        self._search_radius_km = search_radius_km
        self._centroids = centroids

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> NaverMapService:
        """애플리케이션 설정으로 서비스 인스턴스를 생성합니다."""
        resolved_settings = settings or get_settings()
        if not resolved_settings.naver_credentials_configured:
            logger.warning("NAVER_CLIENT_ID/NAVER_CLIENT_SECRET is not configured.")
        return cls(
            client_id=resolved_settings.NAVER_CLIENT_ID,
            client_secret=resolved_settings.NAVER_CLIENT_SECRET,
            relay_base_url=resolved_settings.NAVER_RELAY_BASE_URL.strip() or None,
            user_agent=resolved_settings.NAVER_USER_AGENT,
            timeout_seconds=get_timeout_policy(resolved_settings).naver_api_timeout_seconds,
            search_radius_km=resolved_settings.SEARCH_RADIUS_KM,
        )

    @property
    def centroids(self) -> RegionCentroidTable:
        return self._centroids or get_region_centroids()

    def _url(self, route: NaverRoute) -> str:
        if self._relay_base_url:
            return f"{self._relay_base_url}/{route.value}"
        return UPSTREAM_URLS[route]

    async def _get(self, route: NaverRoute, params: dict[str, Any]) -> dict[str, Any]:
        url = self._url(route)
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            return requests.get(url, params=params, headers=self._headers, timeout=request_timeout)

        response = await asyncio.to_thread(_send)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise NaverApiError(f"Unexpected Naver response type: {type(data).__name__}")
        return data

    async def search_places(
        self,
        query: str,
        location_hint: str | None = None,
        user_location: UserLocation | None = None,
        include_photos: bool = True,
    ) -> list[PlaceSearchResult]:
        """로컬 검색 후 반경 필터, 상위 5개 선택, 대표 사진 보강을 수행합니다."""
        search_query = f"{query} {location_hint}".strip() if location_hint else query.strip()
        if not search_query:
            return []

        params = {
            "query": search_query,
            "display": self._LOCAL_SEARCH_DISPLAY,
            "start": 1,
            "sort": "comment",
            "category": "음식점",
        }
        try:
            data = await self._get(NaverRoute.LOCAL_SEARCH, params)
        except (requests.RequestException, ValueError, NaverApiError) as exc:
            logger.error("Naver local search failed: query=%s error=%s", search_query, exc)
            return []

        items = [item for item in data.get("items") or [] if isinstance(item, dict)]
        places = [self._map_place(item) for item in items]
        logger.info("Naver local search completed: query=%s candidate_count=%d", search_query, len(places))

        if user_location is not None and user_location.has_coordinates:
            places = [place for place in places if self._within_radius(place, user_location)]
            logger.info(
                "Radius filter applied: radius_km=%.1f remaining=%d/%d",
                self._search_radius_km,
                len(places),
                len(items),
            )

        places = places[: self.MAX_RESULTS]
        if include_photos:
            places = list(await asyncio.gather(*(self._attach_photo(place) for place in places)))
        return places

    def _within_radius(self, place: PlaceSearchResult, user_location: UserLocation) -> bool:
        if place.latitude is None or place.longitude is None:
            return True
        distance = haversine_km(user_location.latitude, user_location.longitude, place.latitude, place.longitude)
        return distance <= self._search_radius_km

    async def _attach_photo(self, place: PlaceSearchResult) -> PlaceSearchResult:
        if place.photos:
            return place
        photo_url = await self.find_main_photo(place.name, place.address)
        if photo_url:
            return place.with_photo(photo_url)
        logger.info("No photo found: name=%s", place.name)
        return place

    async def find_main_photo(self, name: str, location: str | None = None) -> str | None:
        """쿼리 변형을 순서대로 시도해 첫 번째 유효한 이미지 URL을 반환합니다."""
        for query in build_photo_queries(name, location):
            params = {
                "query": query,
                "display": self._IMAGE_SEARCH_DISPLAY,
                "start": 1,
                "sort": "sim",
                "filter": "large",
            }
            try:
                data = await self._get(NaverRoute.IMAGE_SEARCH, params)
            except (requests.RequestException, ValueError, NaverApiError) as exc:
                logger.warning("Naver image search failed: query=%s error=%s", query, exc)
                continue

            for item in data.get("items") or []:
                image_url = item.get("link") if isinstance(item, dict) else None
                if is_valid_image_url(image_url):
                    logger.info("Photo found: name=%s query=%s", name, query)
                    return image_url
        return None

    async def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """좌표를 주소로 변환합니다. 실패하면 지역 중심점 테이블로 추정합니다."""
        params = {
            "coords": f"{longitude},{latitude}",
            "sourcecrs": "epsg:4326",
            "targetcrs": "epsg:4326",
            "orders": "roadaddr,addr",
            "output": "json",
        }
        try:
            data = await self._get(NaverRoute.REVERSE_GEOCODE, params)
            status = data.get("status") or {}
            results = data.get("results") or []
            if status.get("code") != 0 or not results:
                raise NaverApiError(f"Naver reverse geocode error: {status.get('name') or status}")
            address = compose_reverse_geocode_address(results[0])
            if not address:
                raise NaverApiError("Naver reverse geocode returned an empty address")
            logger.info("Reverse geocode completed: address=%s", address)
            return address
        except (requests.RequestException, ValueError, NaverApiError) as exc:
            logger.warning("Reverse geocode failed, using centroid table: %s", exc)

        estimated = self.centroids.estimate_address(latitude, longitude)
        logger.info("Estimated address from centroid table: %s", estimated)
        return estimated

    def _map_place(self, raw: dict[str, Any]) -> PlaceSearchResult:
        name = clean_html_tags(raw.get("title"))
        address = str(raw.get("address") or "")
        rating = raw.get("rating")
        try:
            parsed_rating = float(rating) if rating not in (None, "") else None
        except (TypeError, ValueError):
            parsed_rating = None

        return PlaceSearchResult(
            id=raw.get("link") or f"{raw.get('title')}_{address}",
            name=name,
            address=address,
            road_address=raw.get("roadAddress") or None,
            phone=raw.get("telephone") or None,
            rating=parsed_rating,
            category=str(raw.get("category") or ""),
            link=raw.get("link") or None,
            latitude=decode_naver_coordinate(raw.get("mapy")),
            longitude=decode_naver_coordinate(raw.get("mapx")),
        )


@lru_cache(maxsize=1)
def get_naver_map_service() -> NaverMapService:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다."""
    return NaverMapService.from_settings()
