"""장소 검색(search capability) 추상 프로토콜 정의."""

from abc import ABC, abstractmethod

from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import UserLocation


class PlaceSearchProvider(ABC):
    """맛집 검색과 대표 사진 조회를 위한 인터페이스를 정의합니다."""

    MAX_RESULTS: int = 5

    @abstractmethod
    async def search_places(
        self,
        query: str,
        location_hint: str | None = None,
        user_location: UserLocation | None = None,
        include_photos: bool = True,
    ) -> list[PlaceSearchResult]:
        """검색어로 음식점을 검색합니다.

        Args:
            query: 검색 쿼리 (예: "한식 맛집")
            location_hint: 검색어 뒤에 붙일 지역명
            user_location: 좌표가 있으면 반경 필터에 사용
            include_photos: 사진이 없는 결과에 대표 사진 조회를 수행할지 여부

        Returns:
            최대 `MAX_RESULTS`개의 검색 결과. 실패 시 빈 목록
        """
        raise NotImplementedError

    @abstractmethod
    async def find_main_photo(self, name: str, location: str | None = None) -> str | None:
        """음식점 이름으로 대표 사진 URL 하나를 찾습니다.

        Args:
            name: 음식점 이름
            location: 재시도 쿼리에 붙일 주소

        Returns:
            유효한 이미지 URL 또는 None
        """
        raise NotImplementedError
