"""생성형 AI 기반 추천 문구 개인화(personalize capability)."""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.config import Settings, get_settings
from app.core.llm_router import Stage, ainvoke
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy
from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import QuizContext

logger = get_logger(__name__)


class AiRestaurant(BaseModel):
    """AI 응답 배열의 항목 하나.

    이름만 필수이며, 나머지 필드의 타입이 어긋나면 항목을 버리지 않고 값을 보정합니다.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1)
    reason: str = ""
    food_type: str | None = Field(default=None, alias="foodType")
    location: str | None = None
    price: str | None = None
    rating: float | str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @field_validator("reason", mode="before")
    @classmethod
    def _coerce_reason(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("food_type", "location", "price", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        """숫자 등 문자열이 아닌 값은 문자열로 바꾸고, 빈 값은 None으로 둡니다."""
        if value is None or isinstance(value, (dict, list)):
            return None
        text = str(value).strip()
        return text or None

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float | str | None:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return None
        return value

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float | None:
        try:
            return float(value) if value not in (None, "") else None
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True, slots=True)
class Parsed:
    """파싱 성공. 최소 1개의 유효 항목을 가집니다."""

    items: list[AiRestaurant] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """파싱 실패 사유."""

    reason: str


ParseResult = Parsed | ParseFailure


def strip_code_fence(text: str) -> str:
    """마크다운 코드 펜스를 제거합니다."""
    content = (text or "").strip()
    if content.startswith("```"):
        parts = content.split("```")
        if len(parts) > 1:
            content = parts[1].strip()
            if content.startswith("json"):
                content = content[4:].strip()
    return content.strip()


def parse_recommendation_array(text: str) -> ParseResult:
    """응답 텍스트에서 첫 `[`부터 마지막 `]`까지를 JSON 배열로 해석합니다.

    형식이 맞지 않는 항목은 버리고, 남은 항목이 없으면 `ParseFailure`를 반환합니다.
    """
    content = strip_code_fence(text)
    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end <= start:
        return ParseFailure("JSON array not found")

    try:
        raw = json.loads(content[start : end + 1])
    except ValueError as exc:
        return ParseFailure(f"invalid JSON: {exc}")
    if not isinstance(raw, list):
        return ParseFailure("top-level value is not an array")

    items: list[AiRestaurant] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            items.append(AiRestaurant.model_validate(entry))
        except ValidationError as exc:
            logger.debug("Dropping malformed AI item: %s", exc)
    if not items:
        return ParseFailure("no valid items")
    return Parsed(items)


class PersonalizationProvider(ABC):
    """검색 결과 개인화와 직접 추천을 위한 인터페이스."""

    @abstractmethod
    async def personalize(self, places: list[PlaceSearchResult], context: QuizContext) -> ParseResult:
        """검색된 장소마다 `{name, reason, foodType}` 추천 문구를 생성합니다."""
        raise NotImplementedError

    @abstractmethod
    async def discover(self, context: QuizContext) -> ParseResult:
        """검색 결과가 없을 때 지역 기반 실제 맛집을 직접 추천받습니다."""
        raise NotImplementedError


_PERSONALIZE_SYSTEM_PROMPT = (
    "당신은 한국의 맛집 추천 전문가입니다.\n"
    "사용자의 기분과 예산을 고려해 주어진 실제 음식점 각각에 대해 친근한 한국어 추천 이유를 작성하세요.\n"
    "음식점 이름은 입력과 정확히 같게 유지하고, 새로운 음식점을 만들지 마세요.\n"
    "JSON 배열만 반환하세요."
)
_PERSONALIZE_USER_PROMPT = (
    "사용자 정보:\n"
    "- 기분: {mood}\n"
    "- 선호 음식: {food_type}\n"
    "- 예산: {budget}\n"
    "- 위치: {location}\n\n"
    "음식점 목록:\n{places}\n\n"
    '응답 형식: [{{"name": "음식점 이름", "reason": "추천 이유 (1-2문장)", "foodType": "추천 메뉴"}}]'
)

_DISCOVER_SYSTEM_PROMPT = (
    "당신은 한국의 지역 맛집 정보를 잘 아는 추천 전문가입니다.\n"
    "실제로 존재하는 음식점만 추천하고, 정확한 위도/경도를 함께 제공하세요.\n"
    "JSON 배열만 반환하세요."
)
_DISCOVER_USER_PROMPT = (
    "다음 조건에 맞는 {location} 지역의 실제 맛집 3곳을 추천해 주세요.\n"
    "- 기분: {mood}\n"
    "- 선호 음식: {food_type}\n"
    "- 예산: {budget}\n\n"
    "응답 형식:\n"
    '[{{"name": "음식점 이름", "reason": "추천 이유", "location": "주소", "foodType": "대표 메뉴", '
    '"price": "가격대", "rating": 4.5, "latitude": 37.5665, "longitude": 126.978}}]'
)


def _summarize_places(places: list[PlaceSearchResult]) -> str:
    summary = [
        {
            "name": place.name,
            "category": place.category,
            "address": place.road_address or place.address,
        }
        for place in places
    ]
    return json.dumps(summary, ensure_ascii=False, indent=2)


def _response_text(response: Any) -> str:
    content = getattr(response, "content", response)
    return content if isinstance(content, str) else str(content)


class LlmPersonalizationService(PersonalizationProvider):
    """`ChatOpenAI` 라우터를 사용하는 개인화 구현."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._timeout = get_timeout_policy(self._settings).llm_timeout_seconds

    async def personalize(self, places: list[PlaceSearchResult], context: QuizContext) -> ParseResult:
        if not places:
            return ParseFailure("no places to personalize")

        prompt = ChatPromptTemplate.from_messages(
            [("system", _PERSONALIZE_SYSTEM_PROMPT), ("human", _PERSONALIZE_USER_PROMPT)]
        )
        messages = prompt.format_messages(
            mood=context.mood or "상관없음",
            food_type=context.food_type or "상관없음",
            budget=context.budget or "상관없음",
            location=context.location_text,
            places=_summarize_places(places),
        )
        return await self._invoke(Stage.RECOMMEND_PERSONALIZE, messages)

    async def discover(self, context: QuizContext) -> ParseResult:
        prompt = ChatPromptTemplate.from_messages(
            [("system", _DISCOVER_SYSTEM_PROMPT), ("human", _DISCOVER_USER_PROMPT)]
        )
        messages = prompt.format_messages(
            mood=context.mood or "상관없음",
            food_type=context.food_type or "상관없음",
            budget=context.budget or "상관없음",
            location=context.location_text,
        )
        return await self._invoke(Stage.RECOMMEND_DISCOVER, messages)

    async def _invoke(self, stage: Stage, messages: Any) -> ParseResult:
        try:
            response = await asyncio.wait_for(
                ainvoke(
                    stage,
                    messages,
                    settings=self._settings,
                    timeout_seconds=self._timeout,
                    temperature=self._settings.RECOMMEND_LLM_TEMPERATURE,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("LLM call timed out: stage=%s timeout=%s", stage, self._timeout)
            return ParseFailure("timeout")
        except Exception as exc:
            logger.exception("LLM call failed: stage=%s", stage)
            return ParseFailure(f"llm call failed: {exc}")

        result = parse_recommendation_array(_response_text(response))
        if isinstance(result, ParseFailure):
            logger.warning("LLM response parse failed: stage=%s reason=%s", stage, result.reason)
        else:
            logger.info("LLM response parsed: stage=%s items=%d", stage, len(result.items))
        return result
