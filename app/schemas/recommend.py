"""퀴즈 기반 맛집 추천 API 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.geo import is_valid_coordinate

QuestionId = Literal["mood", "foodType", "budget"]


class Answer(BaseModel):
    """퀴즈 한 문항에 대한 사용자 응답."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question_id: QuestionId = Field(..., alias="questionId", description="문항 ID")
    value: str = Field(default="", description="선택한 값")


class UserLocation(BaseModel):
    """사용자 위치. GPS 좌표 또는 수동 입력 주소."""

    latitude: float = Field(default=0.0, description="위도 (수동 입력 시 0)")
    longitude: float = Field(default=0.0, description="경도 (수동 입력 시 0)")
    address: str | None = Field(default=None, description="주소 또는 지역명")

    @property
    def has_coordinates(self) -> bool:
        """거리 계산에 쓸 수 있는 좌표가 있는지 반환합니다."""
        return is_valid_coordinate(self.latitude, self.longitude)


class FoodRecommendation(BaseModel):
    """사용자에게 반환되는 맛집 추천 항목."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: str = Field(..., min_length=1, description="음식점 이름")
    reason: str = Field(..., min_length=1, description="추천 이유")
    location: str | None = Field(default=None, description="주소 또는 위치 설명")
    price: str | None = Field(default=None, description="예상 가격대")
    rating: str | None = Field(default=None, description="평점 표시 문자열")
    distance: str | None = Field(default=None, description="거리 표시 문자열 (예: 1.2km)")
    is_distance_estimated: bool = Field(default=True, description="좌표 기반 계산이 아닌 추정 거리 여부")
    image_url: str | None = Field(default=None, description="대표 이미지 URL")
    food_type: str | None = Field(default=None, description="추천 메뉴")
    phone: str | None = Field(default=None, description="전화번호")
    website: str | None = Field(default=None, description="웹사이트 또는 네이버 링크")
    latitude: float | None = Field(default=None, description="음식점 위도")
    longitude: float | None = Field(default=None, description="음식점 경도")
    map_url: str | None = Field(default=None, description="네이버 지도 검색 링크")
    directions_url: str | None = Field(default=None, description="네이버 지도 길찾기 링크")

    @field_validator("name", "reason")
    @classmethod
    def _strip_required_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("빈 문자열은 허용되지 않습니다.")
        return stripped


class QuizContext(BaseModel):
    """추천 파이프라인 내부에서 공유하는 퀴즈 응답 요약."""

    model_config = ConfigDict(frozen=True)

    mood: str = ""
    food_type: str = ""
    budget: str = ""
    location_text: str = "서울"
    search_query: str = ""
    user_location: UserLocation | None = None

    @property
    def has_user_coordinates(self) -> bool:
        return self.user_location is not None and self.user_location.has_coordinates


class RecommendRequest(BaseModel):
    """추천 요청 본문."""

    answers: list[Answer] = Field(default_factory=list, description="퀴즈 응답 목록")
    location: UserLocation | None = Field(default=None, description="사용자 위치")


class RecommendResponse(BaseModel):
    """추천 응답 본문."""

    recommendations: list[FoodRecommendation] = Field(..., max_length=3, description="최대 3개의 추천")
