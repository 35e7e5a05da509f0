"""AI 응답 파싱 및 개인화 서비스 테스트."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import app.services.personalization_service as personalization_service
from app.core.config import Settings
from app.core.llm_router import Stage
from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import QuizContext
from app.services.personalization_service import (
    LlmPersonalizationService,
    ParseFailure,
    Parsed,
    parse_recommendation_array,
)


def test_parse_extracts_first_array_from_surrounding_text() -> None:
    text = '추천 결과입니다:\n[{"name": "을지로 김치찌개", "reason": "얼큰해요", "foodType": "김치찌개"}]\n맛있게 드세요!'

    result = parse_recommendation_array(text)

    assert isinstance(result, Parsed)
    assert result.items[0].name == "을지로 김치찌개"
    assert result.items[0].food_type == "김치찌개"


def test_parse_strips_code_fence() -> None:
    text = '```json\n[{"name": "광화문 국밥", "reason": "따뜻해요", "latitude": 37.57, "longitude": 126.97}]\n```'

    result = parse_recommendation_array(text)

    assert isinstance(result, Parsed)
    assert result.items[0].latitude == 37.57


def test_parse_drops_malformed_items() -> None:
    result = parse_recommendation_array('[{"name": "  "}, "문자열", {"reason": "이름 없음"}, {"name": "남는 식당"}]')

    assert isinstance(result, Parsed)
    assert [item.name for item in result.items] == ["남는 식당"]


def test_parse_keeps_items_with_off_type_fields() -> None:
    text = (
        '[{"name": "광화문 국밥", "reason": "따뜻해요", "price": 15000, "location": null, '
        '"foodType": 1, "rating": {"score": 4}, "latitude": "37.5721", "longitude": "unknown"},'
        ' {"name": "을지로 김치찌개", "reason": null}]'
    )

    result = parse_recommendation_array(text)

    assert isinstance(result, Parsed)
    gukbap, kimchi = result.items
    assert gukbap.name == "광화문 국밥"
    assert gukbap.price == "15000"
    assert gukbap.location is None
    assert gukbap.food_type == "1"
    assert gukbap.rating is None
    assert gukbap.latitude == 37.5721
    assert gukbap.longitude is None
    assert kimchi.name == "을지로 김치찌개"
    assert kimchi.reason == ""


def test_parse_failures_are_tagged() -> None:
    assert isinstance(parse_recommendation_array("죄송합니다. 추천할 수 없습니다."), ParseFailure)
    assert isinstance(parse_recommendation_array("[not json]"), ParseFailure)
    assert isinstance(parse_recommendation_array("[]"), ParseFailure)
    assert parse_recommendation_array('[{"reason": "x"}]') == ParseFailure("no valid items")


def test_personalize_invokes_speed_stage_and_parses(monkeypatch) -> None:
    captured: dict = {}

    async def _fake_ainvoke(stage, payload, **kwargs):
        captured.update(stage=stage, payload=payload, kwargs=kwargs)
        return SimpleNamespace(content='[{"name": "을지로 김치찌개", "reason": "피곤할 땐 찌개"}]')

    monkeypatch.setattr(personalization_service, "ainvoke", _fake_ainvoke)

    service = LlmPersonalizationService(Settings(OPENAI_API_KEY="test-key", RECOMMEND_LLM_TEMPERATURE=0.3))
    places = [PlaceSearchResult(id="1", name="을지로 김치찌개", address="서울 중구")]
    result = asyncio.run(service.personalize(places, QuizContext(mood="피곤해요", food_type="한식")))

    assert isinstance(result, Parsed)
    assert result.items[0].reason == "피곤할 땐 찌개"
    assert captured["stage"] is Stage.RECOMMEND_PERSONALIZE
    assert captured["kwargs"]["temperature"] == 0.3
    human_message = captured["payload"][-1].content
    assert "을지로 김치찌개" in human_message
    assert "피곤해요" in human_message


def test_discover_returns_failure_when_llm_call_fails(monkeypatch) -> None:
    fake_ainvoke = AsyncMock(side_effect=RuntimeError("OPENAI_API_KEY is not configured."))
    monkeypatch.setattr(personalization_service, "ainvoke", fake_ainvoke)

    service = LlmPersonalizationService(Settings(OPENAI_API_KEY="test-key"))
    result = asyncio.run(service.discover(QuizContext(food_type="한식", location_text="강남구")))

    assert isinstance(result, ParseFailure)
    assert "llm call failed" in result.reason
    assert fake_ainvoke.await_args.args[0] is Stage.RECOMMEND_DISCOVER


def test_personalize_without_places_skips_llm(monkeypatch) -> None:
    async def _fail(*args, **kwargs):
        raise AssertionError("LLM should not be called")

    monkeypatch.setattr(personalization_service, "ainvoke", _fail)

    service = LlmPersonalizationService(Settings(OPENAI_API_KEY="test-key"))

    assert isinstance(asyncio.run(service.personalize([], QuizContext())), ParseFailure)
