"""
체급 정의 및 판별
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class WeightClass:
    """체급 (min_weight 이상 max_weight 이하)"""
    name: str
    min_weight: float
    max_weight: float

    def contains(self, bodyweight: float) -> bool:
        return self.min_weight <= bodyweight <= self.max_weight


OPEN_RANGE = (0.0, 999.0)


def _build(limits: Sequence[float], plus_name: str) -> List[WeightClass]:
    """상한 목록으로 연속 체급 생성 (마지막은 +체급)"""
    classes = []
    lower = 0.0
    for limit in limits:
        classes.append(WeightClass(f"{limit:g}kg", lower, float(limit)))
        lower = round(limit + 0.01, 2)
    classes.append(WeightClass(plus_name, lower, OPEN_RANGE[1]))
    return classes


# IPF 체급
IPF_MEN_CLASSES = _build([59, 66, 74, 83, 93, 105, 120], "120kg+")
IPF_WOMEN_CLASSES = _build([47, 52, 57, 63, 69, 76, 84], "84kg+")

# IWF 체급
IWF_CLASSES = _build([55, 61, 67, 73, 81, 89, 96, 102, 109], "+109kg")

# 이름 -> (최소, 최대) 조회 테이블
WEIGHT_RANGES: Dict[str, Tuple[float, float]] = {
    wc.name: (wc.min_weight, wc.max_weight)
    for wc in IPF_MEN_CLASSES + IPF_WOMEN_CLASSES + IWF_CLASSES
}
# 구 IPF 체급 (레거시 데이터 호환)
WEIGHT_RANGES.update({
    "53kg": (47.01, 53.0),
    "105kg": (93.01, 105.0),
})


def get_weight_range(weight_class: str) -> Tuple[float, float]:
    """체급 이름으로 체중 범위 조회 (알 수 없으면 오픈 범위)"""
    return WEIGHT_RANGES.get(weight_class, OPEN_RANGE)


def is_valid_for_weight_class(bodyweight: float, weight_class: str) -> bool:
    low, high = get_weight_range(weight_class)
    return WeightClass(weight_class, low, high).contains(bodyweight)


def assign_weight_class(
    bodyweight: float,
    classes: Sequence[WeightClass] = IPF_MEN_CLASSES
) -> Optional[WeightClass]:
    """체중에 해당하는 체급 (상한이 체중 이상인 첫 체급)"""
    if bodyweight <= 0:
        return None
    for weight_class in sorted(classes, key=lambda wc: wc.max_weight):
        if bodyweight <= weight_class.max_weight:
            return weight_class
    return None
