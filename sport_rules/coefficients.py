"""
체급 보정 계수 계산 모듈

- Wilks (클래식 5차 다항식)
- DOTS (4차 다항식)
- IPF GL Points
- Sinclair (역도)

모든 함수는 소수점 2자리로 반올림한 점수를 반환하며,
총합 또는 체중이 0 이하이면 0을 반환
"""
import math
from typing import Dict, Union

from .models import Equipment, Gender


# =====================================================
# 계수 상수
# =====================================================

# Wilks: 500 / (a + b*bw + c*bw^2 + d*bw^3 + e*bw^4 + f*bw^5)
WILKS_COEFFICIENTS = {
    Gender.MALE: (
        -216.0475144, 16.2606339, -0.002388645,
        -0.00113732, 7.01863e-6, -1.291e-8,
    ),
    Gender.FEMALE: (
        594.31747775582, -27.23842536447, 0.82112226871,
        -0.00930733913, 4.731582e-5, -9.054e-8,
    ),
}
WILKS_BODYWEIGHT_RANGE = {
    Gender.MALE: (40.0, 201.9),
    Gender.FEMALE: (26.51, 154.53),
}

# DOTS: 500 / (a + b*bw + c*bw^2 + d*bw^3 + e*bw^4)
DOTS_COEFFICIENTS = {
    Gender.MALE: (
        -307.75076, 24.0900756, -0.1918759221,
        0.0007391293, -0.000001093,
    ),
    Gender.FEMALE: (
        -57.96288, 13.6175032, -0.1126655495,
        0.0005158568, -0.0000010706,
    ),
}
DOTS_BODYWEIGHT_RANGE = {
    Gender.MALE: (40.0, 210.0),
    Gender.FEMALE: (40.0, 150.0),
}

# IPF GL: 100 / (A - B * e^(-C * bw))
IPF_GL_COEFFICIENTS = {
    (Gender.MALE, Equipment.RAW): (1199.72839, 1025.18162, 0.00921),
    (Gender.MALE, Equipment.EQUIPPED): (1236.25115, 1449.21864, 0.01644),
    (Gender.FEMALE, Equipment.RAW): (610.32796, 1045.59282, 0.03048),
    (Gender.FEMALE, Equipment.EQUIPPED): (758.63878, 949.31382, 0.02435),
}

# Sinclair: 10 ^ (A * log10(bw / b)^2), bw < b 일 때만 적용
SINCLAIR_COEFFICIENTS = {
    Gender.MALE: (0.751945030, 175.508),
    Gender.FEMALE: (0.783497476, 153.757),
}

COEFFICIENT_NAMES = ("none", "wilks", "dots", "ipf_gl", "sinclair")


def _gender(value: Union[Gender, str]) -> Gender:
    return value if isinstance(value, Gender) else Gender.from_string(value)


def _equipment(value: Union[Equipment, str]) -> Equipment:
    return value if isinstance(value, Equipment) else Equipment(value)


def _polynomial(coefficients, x: float) -> float:
    return sum(c * x ** power for power, c in enumerate(coefficients))


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return max(low, min(high, value))


# =====================================================
# 계수별 점수
# =====================================================

def wilks(total: float, bodyweight: float, gender: Union[Gender, str]) -> float:
    """Wilks 점수"""
    if total <= 0 or bodyweight <= 0:
        return 0
    gender = _gender(gender)
    bw = _clamp(bodyweight, WILKS_BODYWEIGHT_RANGE[gender])
    denominator = _polynomial(WILKS_COEFFICIENTS[gender], bw)
    return round(total * 500 / denominator, 2)


def dots(total: float, bodyweight: float, gender: Union[Gender, str]) -> float:
    """DOTS 점수"""
    if total <= 0 or bodyweight <= 0:
        return 0
    gender = _gender(gender)
    bw = _clamp(bodyweight, DOTS_BODYWEIGHT_RANGE[gender])
    denominator = _polynomial(DOTS_COEFFICIENTS[gender], bw)
    return round(total * 500 / denominator, 2)


def ipf_gl(
    total: float,
    bodyweight: float,
    gender: Union[Gender, str],
    equipment: Union[Equipment, str] = Equipment.RAW
) -> float:
    """IPF GL Points (3종목 합계 기준)"""
    if total <= 0 or bodyweight <= 0:
        return 0
    a, b, c = IPF_GL_COEFFICIENTS[(_gender(gender), _equipment(equipment))]
    denominator = a - b * math.exp(-c * bodyweight)
    return round(total * 100 / denominator, 2)


def sinclair(total: float, bodyweight: float, gender: Union[Gender, str]) -> float:
    """Sinclair 점수 (역도)"""
    if total <= 0 or bodyweight <= 0:
        return 0
    a, reference = SINCLAIR_COEFFICIENTS[_gender(gender)]
    if bodyweight >= reference:
        return round(total, 2)
    coefficient = 10 ** (a * math.log10(bodyweight / reference) ** 2)
    return round(total * coefficient, 2)


# =====================================================
# 통합
# =====================================================

def calculate(
    name: str,
    total: float,
    bodyweight: float,
    gender: Union[Gender, str],
    equipment: Union[Equipment, str] = Equipment.RAW
) -> float:
    """계수 이름으로 점수 계산 ("none"이면 총합 그대로)"""
    if name == "none":
        return round(total, 2)
    if name == "wilks":
        return wilks(total, bodyweight, gender)
    if name == "dots":
        return dots(total, bodyweight, gender)
    if name == "ipf_gl":
        return ipf_gl(total, bodyweight, gender, equipment)
    if name == "sinclair":
        return sinclair(total, bodyweight, gender)
    raise ValueError(
        f"Unknown coefficient: {name} (valid: {', '.join(COEFFICIENT_NAMES)})"
    )


def calculate_all(
    total: float,
    bodyweight: float,
    gender: Union[Gender, str],
    equipment: Union[Equipment, str] = Equipment.RAW
) -> Dict[str, float]:
    """모든 계수 점수"""
    return {
        "wilks": wilks(total, bodyweight, gender),
        "dots": dots(total, bodyweight, gender),
        "ipf_gl": ipf_gl(total, bodyweight, gender, equipment),
        "sinclair": sinclair(total, bodyweight, gender),
    }
