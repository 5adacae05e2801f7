"""
종목별 룰 플러그인
"""
from .base import SportPlugin, TIMER_PHASES, coerce_category_rules
from .crossfit import CrossFitPlugin
from .powerlifting import PowerliftingPlugin
from .streetlifting import StreetliftingPlugin
from .strongman import StrongmanPlugin
from .weightlifting import WeightliftingPlugin

# 기본 등록 순서 (get_sport_from_discipline 우선순위)
BUILTIN_PLUGINS = (
    PowerliftingPlugin,
    WeightliftingPlugin,
    StrongmanPlugin,
    CrossFitPlugin,
    StreetliftingPlugin,
)

__all__ = [
    "SportPlugin",
    "TIMER_PHASES",
    "coerce_category_rules",
    "PowerliftingPlugin",
    "WeightliftingPlugin",
    "StrongmanPlugin",
    "CrossFitPlugin",
    "StreetliftingPlugin",
    "BUILTIN_PLUGINS",
]
