"""
근력 종목 경기 룰 엔진

파워리프팅 / 역도 / 스트롱맨 / 크로스핏 / 스트리트리프팅의
시기 검증, 심판 판정 채점, 순위 계산, 다음 시기 제안
"""
from .coefficients import calculate, calculate_all, dots, ipf_gl, sinclair, wilks
from .errors import (
    CompetitionDataError,
    InvalidAttemptError,
    InvalidStateError,
    JudgeCountError,
    PluginAlreadyRegisteredError,
    PluginNotFoundError,
    SportRulesError,
    UnsupportedDisciplineError,
)
from .loader import CompetitionData, load_competition, load_competition_file
from .models import Athlete, Attempt, AttemptResult, AttemptStatus, Equipment, Gender, JudgeDecision
from .plugins import (
    CrossFitPlugin,
    PowerliftingPlugin,
    SportPlugin,
    StreetliftingPlugin,
    StrongmanPlugin,
    WeightliftingPlugin,
)
from .records import CompetitionRecord, RecordBook, RecordCheck
from .registry import (
    SportPluginRegistry,
    get_plugin_for_sport,
    get_registry,
    get_sport_from_discipline,
    validate_sport_and_discipline,
)
from .schemas import (
    AttemptScore,
    AttemptValidation,
    CategoryRules,
    NextAttemptSuggestion,
    RankingResult,
    TiebreakResult,
    TiebreakRules,
    TimerSettings,
)

__version__ = "1.0.0"

__all__ = [
    "Athlete",
    "Attempt",
    "AttemptResult",
    "AttemptStatus",
    "Equipment",
    "Gender",
    "JudgeDecision",
    "SportPlugin",
    "PowerliftingPlugin",
    "WeightliftingPlugin",
    "StrongmanPlugin",
    "CrossFitPlugin",
    "StreetliftingPlugin",
    "SportPluginRegistry",
    "get_registry",
    "get_plugin_for_sport",
    "validate_sport_and_discipline",
    "get_sport_from_discipline",
    "AttemptValidation",
    "AttemptScore",
    "RankingResult",
    "NextAttemptSuggestion",
    "TiebreakResult",
    "TiebreakRules",
    "TimerSettings",
    "CategoryRules",
    "CompetitionRecord",
    "RecordBook",
    "RecordCheck",
    "CompetitionData",
    "load_competition",
    "load_competition_file",
    "calculate",
    "calculate_all",
    "wilks",
    "dots",
    "ipf_gl",
    "sinclair",
    "SportRulesError",
    "PluginNotFoundError",
    "PluginAlreadyRegisteredError",
    "UnsupportedDisciplineError",
    "JudgeCountError",
    "InvalidAttemptError",
    "InvalidStateError",
    "CompetitionDataError",
]
