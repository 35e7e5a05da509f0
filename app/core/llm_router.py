"""Stage 기반 LLM 라우팅 유틸."""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from time import perf_counter
from typing import Any

from langchain_openai import ChatOpenAI

from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy

logger = get_logger(__name__)


class Tier(StrEnum):
    """Stage 라우팅 tier."""

    QUALITY = "QUALITY"
    SPEED = "SPEED"
    COST = "COST"


class Stage(StrEnum):
    """LLM 호출 stage."""

    RECOMMEND_PERSONALIZE = "RECOMMEND_PERSONALIZE"
    RECOMMEND_DISCOVER = "RECOMMEND_DISCOVER"


_STAGE_TIER_MAP: dict[Stage, Tier] = {
    Stage.RECOMMEND_PERSONALIZE: Tier.SPEED,
    Stage.RECOMMEND_DISCOVER: Tier.QUALITY,
}


def stage_to_tier(stage: Stage) -> Tier:
    """Stage를 tier로 매핑합니다."""
    return _STAGE_TIER_MAP[stage]


def _tier_model_name(tier: Tier, settings: Settings) -> str:
    if tier == Tier.QUALITY:
        return settings.LLM_MODEL_QUALITY.strip()
    if tier == Tier.SPEED:
        return settings.LLM_MODEL_SPEED.strip()
    return settings.LLM_MODEL_COST.strip()


def resolve_model(stage: Stage, settings: Settings | None = None) -> tuple[str, Tier | None, bool]:
    """설정과 stage를 기반으로 최종 모델을 선택합니다.

    Returns:
        (선택된 모델명, 적용된 tier, 라우팅 활성 여부)
    """
    resolved_settings = settings or get_settings()
    fallback_model = resolved_settings.LLM_MODEL_NAME.strip()

    if not resolved_settings.ENABLE_STAGE_LLM_ROUTING:
        return fallback_model, None, False

    tier = stage_to_tier(stage)
    model = _tier_model_name(tier, resolved_settings) or fallback_model
    return model, tier, True


@lru_cache(maxsize=32)
def _get_chat_openai_client(
    model: str,
    temperature: float,
    timeout_seconds: int,
    api_key: str,
) -> ChatOpenAI:
    return ChatOpenAI(
        model=model,
        temperature=temperature,
        api_key=api_key,
        request_timeout=timeout_seconds,
    )


def clear_llm_client_cache() -> None:
    """테스트/운영 시 클라이언트 캐시를 비웁니다."""
    _get_chat_openai_client.cache_clear()


def _log_call(
    *,
    succeeded: bool,
    message: str,
    stage: Stage,
    tier: Tier | None,
    selected_model: str,
    fallback_used: bool,
    started: float,
    exc: Exception | None = None,
) -> None:
    extra = {
        "stage": stage.value,
        "tier": tier.value if tier else None,
        "selected_model": selected_model,
        "fallback_used": fallback_used,
        "latency_ms": (perf_counter() - started) * 1000,
    }
    if succeeded:
        logger.info(message, extra=extra)
    else:
        logger.warning(message, extra=extra, exc_info=exc)


async def ainvoke(
    stage: Stage,
    payload: Any,
    *,
    settings: Settings | None = None,
    timeout_seconds: int | None = None,
    temperature: float | None = None,
) -> Any:
    """Stage 기준으로 모델을 선택해 비동기 LLM 호출을 수행합니다.

    라우팅으로 고른 모델이 실패하면 `LLM_MODEL_NAME`으로 한 번 더 시도합니다.
    """
    resolved_settings = settings or get_settings()
    if not resolved_settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY is not configured.")

    resolved_timeout = (
        get_timeout_policy(resolved_settings).llm_timeout_seconds
        if timeout_seconds is None
        else max(1, int(timeout_seconds))
    )
    resolved_temperature = 0.0 if temperature is None else float(temperature)
    selected_model, tier, routing_enabled = resolve_model(stage, resolved_settings)
    fallback_model = resolved_settings.LLM_MODEL_NAME.strip()

    started = perf_counter()
    try:
        client = _get_chat_openai_client(
            selected_model,
            resolved_temperature,
            resolved_timeout,
            resolved_settings.OPENAI_API_KEY,
        )
        response = await client.ainvoke(payload)
        _log_call(
            succeeded=True,
            message="LLM async call succeeded",
            stage=stage,
            tier=tier,
            selected_model=selected_model,
            fallback_used=False,
            started=started,
        )
        return response
    except Exception as exc:
        can_fallback = routing_enabled and selected_model != fallback_model
        _log_call(
            succeeded=False,
            message="LLM async call failed. Retrying with fallback model." if can_fallback else "LLM async call failed",
            stage=stage,
            tier=tier,
            selected_model=selected_model,
            fallback_used=False,
            started=started,
            exc=exc,
        )
        if not can_fallback:
            raise

    fallback_started = perf_counter()
    fallback_client = _get_chat_openai_client(
        fallback_model,
        resolved_temperature,
        resolved_timeout,
        resolved_settings.OPENAI_API_KEY,
    )
    try:
        response = await fallback_client.ainvoke(payload)
    except Exception as fallback_exc:
        _log_call(
            succeeded=False,
            message="LLM async fallback call failed",
            stage=stage,
            tier=tier,
            selected_model=fallback_model,
            fallback_used=True,
            started=fallback_started,
            exc=fallback_exc,
        )
        raise

    _log_call(
        succeeded=True,
        message="LLM async call succeeded",
        stage=stage,
        tier=tier,
        selected_model=fallback_model,
        fallback_used=True,
        started=fallback_started,
    )
    return response
