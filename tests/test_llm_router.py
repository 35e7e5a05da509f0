"""Stage 기반 LLM 라우팅 테스트."""

from __future__ import annotations

import asyncio

import pytest

import app.core.llm_router as llm_router
from app.core.config import Settings
from app.core.llm_router import Stage, Tier, resolve_model


def test_resolve_model_uses_default_when_routing_disabled() -> None:
    settings = Settings(LLM_MODEL_NAME="gpt-4o-mini", LLM_MODEL_SPEED="gpt-speed")

    assert resolve_model(Stage.RECOMMEND_PERSONALIZE, settings) == ("gpt-4o-mini", None, False)


def test_resolve_model_maps_stage_to_tier() -> None:
    settings = Settings(
        ENABLE_STAGE_LLM_ROUTING=True,
        LLM_MODEL_NAME="gpt-4o-mini",
        LLM_MODEL_QUALITY="gpt-quality",
        LLM_MODEL_SPEED="gpt-speed",
    )

    assert resolve_model(Stage.RECOMMEND_PERSONALIZE, settings) == ("gpt-speed", Tier.SPEED, True)
    assert resolve_model(Stage.RECOMMEND_DISCOVER, settings) == ("gpt-quality", Tier.QUALITY, True)


def test_ainvoke_requires_api_key() -> None:
    with pytest.raises(RuntimeError):
        asyncio.run(llm_router.ainvoke(Stage.RECOMMEND_DISCOVER, "hi", settings=Settings(OPENAI_API_KEY=None)))


def test_ainvoke_retries_with_fallback_model(monkeypatch) -> None:
    calls: list[str] = []

    class _FakeClient:
        def __init__(self, model: str) -> None:
            self.model = model

        async def ainvoke(self, payload):
            calls.append(self.model)
            if self.model == "gpt-quality":
                raise RuntimeError("model overloaded")
            return f"{self.model}:{payload}"

    monkeypatch.setattr(
        llm_router,
        "_get_chat_openai_client",
        lambda model, temperature, timeout_seconds, api_key: _FakeClient(model),
    )

    settings = Settings(
        OPENAI_API_KEY="test-key",
        ENABLE_STAGE_LLM_ROUTING=True,
        LLM_MODEL_NAME="gpt-4o-mini",
        LLM_MODEL_QUALITY="gpt-quality",
    )
    response = asyncio.run(llm_router.ainvoke(Stage.RECOMMEND_DISCOVER, "prompt", settings=settings))

    assert response == "gpt-4o-mini:prompt"
    assert calls == ["gpt-quality", "gpt-4o-mini"]
