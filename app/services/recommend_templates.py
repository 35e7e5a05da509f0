"""맛집 추천 문구/가격대/메뉴 템플릿."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_MOOD_KEYWORD = "맛있는"
UNKNOWN_PRICE = "가격 문의"
DEFAULT_MENU = "특별 메뉴"


@dataclass(frozen=True, slots=True)
class MoodProfile:
    """기분별 검색 키워드와 가산점 토큰."""

    stem: str
    keyword: str
    bonus_tokens: tuple[str, ...]


MOOD_PROFILES: tuple[MoodProfile, ...] = (
    MoodProfile("행복", "분위기 좋은", ("행복", "분위기", "파티")),
    MoodProfile("피곤", "든든한 집밥", ("집밥", "든든", "국밥", "백반")),
    MoodProfile("스트레스", "매운 음식", ("매운", "불", "떡볶이", "짬뽕")),
    MoodProfile("평범", "일반적인", ("식당", "집")),
    MoodProfile("설레", "특별한 데이트", ("데이트", "다이닝", "레스토랑", "비스트로")),
    MoodProfile("우울", "따뜻한 위로", ("따뜻", "국수", "찌개", "탕")),
    MoodProfile("활기", "에너지 충전", ("고기", "구이", "바베큐", "스테이크")),
    MoodProfile("여유", "힐링", ("힐링", "카페", "정원", "브런치")),
)


@dataclass(frozen=True, slots=True)
class BudgetTier:
    """예산 구간. `max_amount`가 None이면 최상위 구간입니다."""

    level: int
    max_amount: int | None
    price_range: str
    keyword: str
    name_hints: tuple[str, ...]


BUDGET_TIERS: tuple[BudgetTier, ...] = (
    BudgetTier(1, 10_000, "8,000-12,000원", "저렴한 가성비", ("분식", "김밥", "국수", "백반", "기사식당")),
    BudgetTier(2, 15_000, "12,000-18,000원", "합리적인 가격", ("식당", "백반", "국밥")),
    BudgetTier(3, 20_000, "15,000-25,000원", "합리적인 가격", ("식당", "전문점")),
    BudgetTier(4, 30_000, "25,000-35,000원", "적당한 가격", ("전문점", "하우스", "키친")),
    BudgetTier(5, 40_000, "35,000-45,000원", "고급 맛집", ("명가", "레스토랑", "다이닝")),
    BudgetTier(6, None, "45,000-55,000원", "고급 맛집", ("명가", "레스토랑", "다이닝", "오마카세")),
)

_MAN_PATTERN = re.compile(r"(\d+(?:\.\d+)?)만(?:(\d+)천)?")
_CHEON_PATTERN = re.compile(r"(\d+)천")
_PLAIN_AMOUNT_PATTERN = re.compile(r"\d{4,}")

FOOD_MENUS: dict[str, tuple[str, ...]] = {
    "한식": ("김치찌개", "비빔밥", "불고기", "갈비탕", "삼겹살", "냉면", "된장찌개", "제육볶음"),
    "중식": ("짜장면", "짬뽕", "탕수육", "마파두부", "깐풍기", "볶음밥", "군만두", "양장피"),
    "일식": ("라멘", "초밥", "돈까스", "우동", "규동", "야키토리", "타코야키", "오코노미야키"),
    "양식": ("스테이크", "파스타", "피자", "햄버거", "리조또", "샐러드", "오믈렛", "그라탕"),
    "분식": ("떡볶이", "김밥", "라면", "순대", "튀김", "어묵", "만두", "잔치국수"),
    "패스트푸드": ("햄버거", "피자", "치킨", "핫도그", "감자튀김", "너겟", "샌드위치"),
    "채식": ("샐러드", "비건버거", "두부스테이크", "야채볶음", "퀴노아볼", "아보카도토스트"),
    "동남아식": ("팟타이", "똠얌꿍", "그린커리", "쌀국수", "분짜", "나시고랭"),
    "인도식": ("카레", "난", "비리야니", "탄두리치킨", "사모사", "치킨티카"),
    "멕시칸": ("타코", "부리또", "나초", "퀘사디야", "엔칠라다", "파히타"),
    "이탈리안": ("파스타", "피자", "리조또", "라자냐", "뇨끼", "브루스케타"),
    "프렌치": ("스테이크", "오니언수프", "라따뚜이", "코코뱅", "크로크무슈", "에스카르고"),
    "태국식": ("팟타이", "똠얌꿍", "그린커리", "쏨땀", "카오팟", "가파오"),
    "베트남식": ("쌀국수", "분짜", "반미", "월남쌈", "분보후에", "반쎄오"),
    "아시안퓨전": ("퓨전볶음밥", "아시안샐러드", "퓨전카레", "아시안타코", "퓨전덮밥"),
    "치킨": ("후라이드치킨", "양념치킨", "간장치킨", "마늘치킨", "핫윙", "치킨텐더"),
    "피자": ("페퍼로니피자", "마르게리타", "불고기피자", "치즈피자", "고르곤졸라피자"),
    "버거": ("비프버거", "치킨버거", "치즈버거", "베이컨버거", "더블버거", "바비큐버거"),
    "샐러드": ("시저샐러드", "그린샐러드", "코브샐러드", "치킨샐러드", "퀴노아샐러드"),
    "디저트": ("케이크", "마카롱", "아이스크림", "티라미수", "크렘브륄레", "타르트"),
}


def find_mood_profile(mood: str) -> MoodProfile | None:
    """기분 문자열에 해당하는 프로필을 찾습니다."""
    for profile in MOOD_PROFILES:
        if profile.stem in mood:
            return profile
    return None


def mood_keyword(mood: str) -> str:
    profile = find_mood_profile(mood)
    return profile.keyword if profile else DEFAULT_MOOD_KEYWORD


def parse_budget_amount(budget: str) -> int | None:
    """예산 문자열을 원 단위 금액으로 변환합니다.

    `1만원`, `1만5천원`, `5천원`, `50000`, `50,000원` 형식을 지원하고
    `상관없음`처럼 금액이 없으면 None을 반환합니다.
    """
    normalized = (budget or "").replace(",", "").replace(" ", "")
    if not normalized:
        return None

    if match := _MAN_PATTERN.search(normalized):
        amount = float(match.group(1)) * 10_000
        if match.group(2):
            amount += int(match.group(2)) * 1_000
        return int(amount)
    if match := _PLAIN_AMOUNT_PATTERN.search(normalized):
        return int(match.group(0))
    if match := _CHEON_PATTERN.search(normalized):
        return int(match.group(1)) * 1_000
    return None


def resolve_budget_tier(budget: str) -> BudgetTier | None:
    """예산 문자열이 속한 가격 구간을 반환합니다."""
    amount = parse_budget_amount(budget)
    if amount is None or amount <= 0:
        return None
    for tier in BUDGET_TIERS:
        if tier.max_amount is None or amount <= tier.max_amount:
            return tier
    return BUDGET_TIERS[-1]


def budget_keyword(budget: str) -> str:
    tier = resolve_budget_tier(budget)
    return tier.keyword if tier else ""


def estimate_price(budget: str) -> str:
    """예산에 맞는 예상 가격대 문자열을 반환합니다."""
    tier = resolve_budget_tier(budget)
    return tier.price_range if tier else UNKNOWN_PRICE


def menu_candidates(food_type: str) -> tuple[str, ...]:
    return FOOD_MENUS.get(food_type.strip(), (DEFAULT_MENU,))


def build_search_phrase(food_type: str) -> str:
    """네이버 로컬 검색에 사용할 기본 검색어를 만듭니다."""
    return f"{food_type.strip()} 맛집".strip()


def build_template_reason(mood: str, food_type: str, budget: str) -> str:
    """AI 추천 문구가 없을 때 쓰는 결정적 추천 이유."""
    mood_text = mood.strip() or "오늘 같은"
    food_text = food_type.strip() or "다양한 메뉴의"
    budget_text = f"{budget.strip()} 예산으로" if budget.strip() else "부담 없이"
    return (
        f"{mood_text} 기분에 어울리는 {mood_keyword(mood)} {food_text} 맛집이에요. "
        f"{budget_text} 즐기기 좋은 곳으로 추천드려요!"
    )


def build_fallback_entries(mood: str, food_type: str, budget: str, has_location: bool) -> list[dict[str, str]]:
    """실시간 검색/AI 추천이 모두 실패했을 때 쓰는 합성 추천 3건의 문구."""
    food_label = food_type.strip() or "오늘의"
    mood_label = mood.strip() or "지금"
    budget_label = budget.strip() or "원하는"
    location_text = "현재 위치 근처에서" if has_location else "주변에서"

    entries = [
        {
            "name": f"AI 추천 {food_label} 맛집",
            "reason": (
                f"실시간 검색이 제한되어 있지만, {mood_label} 기분에는 {food_label} 메뉴가 잘 어울려요. "
                f"{location_text} {budget_label} 예산 범위의 맛집을 찾아보세요!"
            ),
            "rating": "맛집 앱에서 확인",
            "location_hint": "근처 맛집 직접 검색 권장",
        },
        {
            "name": f"스마트 추천 {food_label} 전문점",
            "reason": (
                f"{mood_label} 상태일 때 {food_label} 메뉴를 고른 분들의 만족도가 높았어요. "
                f"{location_text} {mood_keyword(mood)} 곳을 골라보세요!"
            ),
            "rating": "4.5+ 예상",
            "location_hint": "지역별 맛집 탐색 추천",
        },
        {
            "name": f"개인화 {food_label} 추천",
            "reason": (
                f"{mood_label} 기분과 {budget_label} 예산을 고려하면 "
                f"{food_label} 전문점이 가장 만족스러운 선택이 될 거예요."
            ),
            "rating": "리뷰 사이트 확인",
            "location_hint": "주변 지역 직접 탐색",
        },
    ]
    for entry in entries:
        entry["name"] = " ".join(entry["name"].split())
    return entries


def placeholder_image_url(food_type: str, index: int) -> str:
    """합성 추천에 쓰는 결정적 플레이스홀더 이미지 URL."""
    seed = index + (ord(food_type[0]) * 10 if food_type else 0)
    return f"https://picsum.photos/800/600?random={seed}"
