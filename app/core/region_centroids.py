"""오프라인 지역 추정을 위한 지역 중심점(centroid) 테이블.

네이버 역지오코딩이 실패했을 때와 좌표만 있는 위치로 검색어를 만들 때
같은 테이블을 공유합니다. 데이터는 `app/data/region_centroids.json`에서 읽고
`REGION_CENTROIDS_PATH`로 교체할 수 있습니다.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from app.core.config import get_settings
from app.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CENTROIDS_PATH = Path(__file__).resolve().parent.parent / "data" / "region_centroids.json"


@dataclass(frozen=True, slots=True)
class RegionCentroid:
    """이름이 붙은 지역 중심 좌표와 포함 반경(도 단위)."""

    name: str
    area: str
    latitude: float
    longitude: float
    radius: float

    def distance_to(self, latitude: float, longitude: float) -> float:
        """위경도 평면상의 유클리드 거리(도 단위)를 반환합니다."""
        return math.hypot(latitude - self.latitude, longitude - self.longitude)


@dataclass(frozen=True, slots=True)
class RegionCentroidTable:
    """순서가 보존되는 지역 중심점 테이블."""

    regions: tuple[RegionCentroid, ...]
    default_name: str
    default_area: str

    def nearest(self, latitude: float, longitude: float) -> RegionCentroid | None:
        """반경 안에 좌표를 포함하는 지역 중 가장 가까운 지역을 반환합니다.

        거리가 같으면 테이블 앞쪽 지역이 유지됩니다.
        """
        best: RegionCentroid | None = None
        best_distance = math.inf
        for region in self.regions:
            distance = region.distance_to(latitude, longitude)
            if distance <= region.radius and distance < best_distance:
                best = region
                best_distance = distance
        return best

    def estimate_address(self, latitude: float, longitude: float) -> str:
        """좌표에 해당하는 지역 이름을 반환합니다. 매칭이 없으면 기본 지역입니다."""
        region = self.nearest(latitude, longitude)
        return region.name if region else self.default_name

    def estimate_area(self, latitude: float, longitude: float) -> str:
        """검색어에 쓸 짧은 지역명을 반환합니다."""
        region = self.nearest(latitude, longitude)
        return region.area if region else self.default_area


def load_region_centroids(path: str | Path) -> RegionCentroidTable:
    """JSON 파일에서 지역 중심점 테이블을 읽습니다."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    regions = tuple(
        RegionCentroid(
            name=str(item["name"]),
            area=str(item.get("area") or item["name"]),
            latitude=float(item["lat"]),
            longitude=float(item["lng"]),
            radius=float(item["radius"]),
        )
        for item in raw.get("regions", [])
    )
    if not regions:
        raise ValueError(f"지역 중심점 테이블이 비어 있습니다: {path}")

    return RegionCentroidTable(
        regions=regions,
        default_name=str(raw.get("default_name") or "서울시 중구"),
        default_area=str(raw.get("default_area") or "서울"),
    )


@lru_cache(maxsize=1)
def get_region_centroids() -> RegionCentroidTable:
    """설정된 경로의 테이블을 한 번만 읽어 공유합니다."""
    configured = get_settings().REGION_CENTROIDS_PATH.strip()
    path = Path(configured) if configured else DEFAULT_CENTROIDS_PATH
    table = load_region_centroids(path)
    logger.info("Region centroid table loaded: path=%s regions=%d", path, len(table.regions))
    return table
