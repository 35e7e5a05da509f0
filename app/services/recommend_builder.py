"""추천 그래프 노드가 공유하는 추천 항목 생성/정렬 로직."""

from __future__ import annotations

import random

from app.core.geo import format_distance_km, haversine_km, is_valid_coordinate, offset_point, parse_distance_km
from app.core.logger import get_logger
from app.core.region_centroids import RegionCentroidTable
from app.schemas.place import PlaceSearchResult
from app.schemas.recommend import Answer, FoodRecommendation, QuizContext, UserLocation
from app.services.map_links import build_directions_url, build_search_url
from app.services.personalization_service import AiRestaurant
from app.services.recommend_templates import (
    build_fallback_entries,
    build_search_phrase,
    build_template_reason,
    estimate_price,
    find_mood_profile,
    menu_candidates,
    placeholder_image_url,
    resolve_budget_tier,
)

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 3
DEFAULT_LOCATION_TEXT = "서울"

PLACEHOLDER_DISTANCE_RANGE_KM = (0.1, 2.5)
SYNTHETIC_OFFSET_RANGE_KM = (0.5, 3.0)
PLACEHOLDER_RATING_RANGE = (4.0, 4.8)

MOOD_MATCH_BONUS = 5.0
BUDGET_MATCH_BONUS = 3.0
JITTER_SCALE = 10.0
DISTANCE_PIVOT_KM = 2.0
DISTANCE_WEIGHT = 2.0


def answer_value(answers: list[Answer], question_id: str) -> str:
    """문항 ID에 해당하는 응답을 반환합니다. 없으면 빈 문자열입니다."""
    for answer in answers:
        if answer.question_id == question_id:
            return answer.value.strip()
    return ""


def resolve_location_text(location: UserLocation | None, centroids: RegionCentroidTable) -> str:
    """검색어에 붙일 지역명. 주소 > 좌표 기반 지역 추정 > 서울 순입니다."""
    if location is None:
        return DEFAULT_LOCATION_TEXT
    if location.address and location.address.strip():
        return location.address.strip()
    if location.has_coordinates:
        return centroids.estimate_area(location.latitude, location.longitude)
    return DEFAULT_LOCATION_TEXT


def build_quiz_context(
    answers: list[Answer],
    location: UserLocation | None,
    centroids: RegionCentroidTable,
) -> QuizContext:
    food_type = answer_value(answers, "foodType")
    return QuizContext(
        mood=answer_value(answers, "mood"),
        food_type=food_type,
        budget=answer_value(answers, "budget"),
        location_text=resolve_location_text(location, centroids),
        search_query=build_search_phrase(food_type),
        user_location=location,
    )


def compute_distance(
    context: QuizContext,
    latitude: float | None,
    longitude: float | None,
    rng: random.Random,
) -> tuple[str, bool]:
    """(거리 문자열, 추정 여부)를 반환합니다.

    사용자/장소 좌표가 모두 있으면 haversine 거리, 아니면 임의의 추정 거리입니다.
    """
    user_location = context.user_location
    if context.has_user_coordinates and is_valid_coordinate(latitude, longitude):
        distance = haversine_km(user_location.latitude, user_location.longitude, latitude, longitude)
        return format_distance_km(distance), False
    return format_distance_km(rng.uniform(*PLACEHOLDER_DISTANCE_RANGE_KM)), True


def format_rating(rating: float | str | None, rng: random.Random) -> str:
    if isinstance(rating, (int, float)) and rating > 0:
        return f"{float(rating):.1f}/5.0"
    if isinstance(rating, str) and rating.strip():
        return rating.strip()
    return f"{rng.uniform(*PLACEHOLDER_RATING_RANGE):.1f}/5.0"


def pick_menu(context: QuizContext, rng: random.Random) -> str:
    return rng.choice(menu_candidates(context.food_type))


def _ai_items_by_name(items: list[AiRestaurant]) -> dict[str, AiRestaurant]:
    return {item.name.lower(): item for item in items}


def build_from_places(
    places: list[PlaceSearchResult],
    ai_items: list[AiRestaurant],
    context: QuizContext,
    rng: random.Random,
) -> list[FoodRecommendation]:
    """검색된 실제 장소와 AI 문구를 합쳐 추천 항목을 만듭니다.

    AI 문구가 없거나 비어 있는 장소는 템플릿 문구를 사용합니다.
    """
    by_name = _ai_items_by_name(ai_items)
    recommendations: list[FoodRecommendation] = []
    for index, place in enumerate(places):
        if not place.name.strip():
            continue
        ai_item = by_name.get(place.name.lower())
        if ai_item is None and len(ai_items) == len(places):
            ai_item = ai_items[index]

        reason = ai_item.reason if ai_item and ai_item.reason else ""
        if not reason:
            reason = build_template_reason(context.mood, context.food_type, context.budget)
        food_type = ai_item.food_type if ai_item and ai_item.food_type else pick_menu(context, rng)

        distance, estimated = compute_distance(context, place.latitude, place.longitude, rng)
        recommendations.append(
            FoodRecommendation(
                name=place.name,
                reason=reason,
                location=place.road_address or place.address or context.location_text,
                price=estimate_price(context.budget),
                rating=format_rating(place.rating, rng),
                distance=distance,
                is_distance_estimated=estimated,
                image_url=place.main_photo_url,
                food_type=food_type,
                phone=place.phone,
                website=place.link,
                latitude=place.latitude,
                longitude=place.longitude,
            )
        )
    return recommendations


def build_from_ai_items(
    items: list[AiRestaurant],
    context: QuizContext,
    rng: random.Random,
) -> list[FoodRecommendation]:
    """AI가 직접 추천한 맛집 목록을 추천 항목으로 변환합니다."""
    recommendations: list[FoodRecommendation] = []
    for index, item in enumerate(items):
        latitude = item.latitude if is_valid_coordinate(item.latitude, item.longitude) else None
        longitude = item.longitude if latitude is not None else None
        distance, estimated = compute_distance(context, latitude, longitude, rng)
        recommendations.append(
            FoodRecommendation(
                name=item.name,
                reason=item.reason or build_template_reason(context.mood, context.food_type, context.budget),
                location=item.location or context.location_text,
                price=item.price or estimate_price(context.budget),
                rating=format_rating(item.rating, rng),
                distance=distance,
                is_distance_estimated=estimated,
                image_url=placeholder_image_url(context.food_type, index + 1),
                food_type=item.food_type or pick_menu(context, rng),
                latitude=latitude,
                longitude=longitude,
            )
        )
    return recommendations


def synthesize_recommendations(context: QuizContext, rng: random.Random) -> list[FoodRecommendation]:
    """외부 호출 없이 템플릿 추천 3건을 만듭니다.

    사용자 좌표가 있으면 각 항목을 임의 방위로 0.5~3km 떨어진 지점에 배치합니다.
    """
    entries = build_fallback_entries(
        context.mood,
        context.food_type,
        context.budget,
        has_location=context.user_location is not None,
    )
    user_location = context.user_location
    recommendations: list[FoodRecommendation] = []
    for index, entry in enumerate(entries, start=1):
        latitude: float | None = None
        longitude: float | None = None
        if context.has_user_coordinates:
            offset_km = rng.uniform(*SYNTHETIC_OFFSET_RANGE_KM)
            latitude, longitude = offset_point(
                user_location.latitude,
                user_location.longitude,
                offset_km,
                rng.uniform(0.0, 360.0),
            )
            distance = format_distance_km(offset_km)
        else:
            distance = format_distance_km(rng.uniform(*PLACEHOLDER_DISTANCE_RANGE_KM))

        if user_location is not None and user_location.address:
            location_text = f"{user_location.address} 근처"
        else:
            location_text = entry["location_hint"]

        recommendations.append(
            FoodRecommendation(
                name=entry["name"],
                reason=entry["reason"],
                location=location_text,
                price=estimate_price(context.budget),
                rating=entry["rating"],
                distance=distance,
                is_distance_estimated=True,
                image_url=placeholder_image_url(context.food_type, index),
                food_type=pick_menu(context, rng),
                latitude=latitude,
                longitude=longitude,
            )
        )
    return recommendations


def dedupe_by_name(recommendations: list[FoodRecommendation]) -> list[FoodRecommendation]:
    """대소문자를 무시한 이름 기준으로 첫 항목만 남깁니다."""
    seen: set[str] = set()
    unique: list[FoodRecommendation] = []
    for recommendation in recommendations:
        key = recommendation.name.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(recommendation)
    return unique


def score_recommendation(recommendation: FoodRecommendation, context: QuizContext, rng: random.Random) -> float:
    """임의 가중치 + 기분/예산 일치 가산점 + 근거리 가산점."""
    score = rng.random() * JITTER_SCALE
    haystack = f"{recommendation.name} {recommendation.food_type or ''}"

    profile = find_mood_profile(context.mood)
    if profile and any(token in haystack for token in profile.bonus_tokens):
        score += MOOD_MATCH_BONUS

    tier = resolve_budget_tier(context.budget)
    if tier and any(hint in recommendation.name for hint in tier.name_hints):
        score += BUDGET_MATCH_BONUS

    if context.user_location is not None:
        distance_km = parse_distance_km(recommendation.distance)
        if distance_km is not None:
            score += (DISTANCE_PIVOT_KM - distance_km) * DISTANCE_WEIGHT
    return score


def attach_map_links(recommendation: FoodRecommendation, context: QuizContext) -> FoodRecommendation:
    user_location = context.user_location
    user_lat = user_location.latitude if user_location else None
    user_lng = user_location.longitude if user_location else None
    return recommendation.model_copy(
        update={
            "map_url": build_search_url(
                recommendation.name,
                recommendation.latitude,
                recommendation.longitude,
                recommendation.location,
            ),
            "directions_url": build_directions_url(
                recommendation.name,
                recommendation.latitude,
                recommendation.longitude,
                user_lat,
                user_lng,
            ),
        }
    )


def rank_recommendations(
    recommendations: list[FoodRecommendation],
    context: QuizContext,
    rng: random.Random,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[FoodRecommendation]:
    """중복 제거 후 항목마다 한 번씩 점수를 매겨 상위 `limit`개를 반환합니다."""
    unique = dedupe_by_name(recommendations)
    scored = [(score_recommendation(item, context, rng), item) for item in unique]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    ranked = [attach_map_links(item, context) for _, item in scored[:limit]]
    logger.info(
        "Recommendations ranked: candidates=%d unique=%d returned=%d",
        len(recommendations),
        len(unique),
        len(ranked),
    )
    return ranked
