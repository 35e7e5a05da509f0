"""네이버 API 릴레이 및 헬스 체크 응답 스키마."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

HEALTH_MESSAGE = "LunchHunt Backend Server is running!"


class RelayErrorResponse(BaseModel):
    """릴레이 실패 시 반환하는 오류 봉투."""

    error: str = Field(..., description="실패한 API 요약")
    details: Any = Field(default=None, description="업스트림 응답 본문 또는 예외 메시지")


class HealthResponse(BaseModel):
    """헬스 체크 응답."""

    status: str = Field(default="OK", description="서버 상태")
    message: str = Field(..., description="상태 메시지")
    environment: str = Field(..., description="실행 환경")
    timestamp: str = Field(..., description="ISO-8601 응답 시각")

    @classmethod
    def now(cls, environment: str) -> "HealthResponse":
        """현재 UTC 시각으로 헬스 체크 응답을 만듭니다."""
        return cls(
            status="OK",
            message=HEALTH_MESSAGE,
            environment=environment,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )


class ReverseGeocodeResponse(BaseModel):
    """좌표 → 주소 변환 결과."""

    address: str = Field(..., description="주소")
    latitude: float = Field(..., description="위도")
    longitude: float = Field(..., description="경도")


class RegionEstimateResponse(BaseModel):
    """지역 중심점 테이블 기반 추정 결과."""

    name: str = Field(..., description="지역 이름")
    area: str = Field(..., description="검색어용 짧은 지역명")
    matched: bool = Field(..., description="반경 내 지역과 매칭되었는지 여부")
