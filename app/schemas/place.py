"""네이버 로컬 검색 응답을 표준화한 Place 모델."""

from pydantic import BaseModel, Field


class PlacePhoto(BaseModel):
    """장소 대표 사진."""

    photo_url: str = Field(..., description="원본 이미지 URL")
    thumbnail_url: str = Field(..., description="썸네일 URL")
    width: int = Field(default=400, description="너비(px)")
    height: int = Field(default=300, description="높이(px)")


class PlaceSearchResult(BaseModel):
    """네이버 로컬 검색 결과 한 건."""

    id: str = Field(..., description="네이버 링크 또는 이름+주소 기반 식별자")
    name: str = Field(..., description="HTML 태그를 제거한 장소 이름")
    address: str = Field(default="", description="지번 주소")
    road_address: str | None = Field(default=None, description="도로명 주소")
    phone: str | None = Field(default=None, description="전화번호")
    rating: float | None = Field(default=None, description="평점")
    photos: list[PlacePhoto] = Field(default_factory=list, description="사진 목록")
    category: str = Field(default="", description="네이버 카테고리")
    link: str | None = Field(default=None, description="네이버/홈페이지 링크")
    latitude: float | None = Field(default=None, description="위도 (mapy / 1e7)")
    longitude: float | None = Field(default=None, description="경도 (mapx / 1e7)")

    @property
    def main_photo_url(self) -> str | None:
        """첫 번째 사진 URL을 반환합니다."""
        return self.photos[0].photo_url if self.photos else None

    def with_photo(self, photo_url: str) -> "PlaceSearchResult":
        """대표 사진을 채운 사본을 반환합니다."""
        photo = PlacePhoto(photo_url=photo_url, thumbnail_url=photo_url)
        return self.model_copy(update={"photos": [photo]})
