"""
Sport Plugin 기본 클래스

종목별 플러그인이 구현해야 하는 계약과 공통 도우미:
- 시기 검증 / 채점 / 랭킹 / 다음 시기 제안 (종목별 구현)
- 동점 처리 / 타이머 / 경기 순서 (공통 구현, 종목별 설정)
"""
from abc import ABC, abstractmethod
from itertools import groupby
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from .. import coefficients
from ..config import get_settings
from ..models import Athlete, Attempt, AttemptStatus, JudgeVote
from ..schemas import (
    AttemptScore,
    AttemptValidation,
    CategoryRules,
    NextAttemptSuggestion,
    RankingResult,
    TiebreakResult,
    TiebreakRules,
    TimerSettings,
)

TIMER_PHASES = ("attempt", "rest", "warmup")

_LAST = float("inf")


def coerce_category_rules(rules: Union[CategoryRules, Dict[str, Any], None]) -> CategoryRules:
    """dict / None 을 CategoryRules 로 변환 (기본 계수는 설정값)"""
    if isinstance(rules, CategoryRules):
        return rules
    settings = get_settings()
    data = {
        "coefficient": settings.default_coefficient,
        "equipment": settings.default_equipment,
    }
    data.update(rules or {})
    return CategoryRules(**data)


class SportPlugin(ABC):
    """종목 플러그인 계약"""

    sport_name: str = ""
    display_name: str = ""
    version: str = "1.0.0"
    disciplines: Tuple[str, ...] = ()

    max_attempts: int = 3
    plate_increment: float = 2.5

    # (시기 시간, 휴식 시간, 웜업 시간) 초
    timer_defaults: Tuple[int, int, int] = (60, 120, 600)
    timer_overrides: Dict[str, Dict[str, int]] = {}

    default_tiebreak: Tuple[str, ...] = ("bodyweight", "lot_number")

    @property
    def supported_disciplines(self) -> List[str]:
        return list(self.disciplines)

    def supports(self, discipline: str) -> bool:
        return discipline in self.disciplines

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.sport_name} v{self.version}>"

    # =====================================================
    # 종목별 구현
    # =====================================================

    @abstractmethod
    def validate_attempt(
        self,
        athlete_id: str,
        discipline: str,
        weight: float,
        attempt_number: int,
        previous_attempts: Sequence[Attempt]
    ) -> AttemptValidation:
        """신고 시기 검증 (위반 사항을 모두 수집, 예외 없음)"""

    @abstractmethod
    def score_attempt(
        self,
        athlete_id: str,
        discipline: str,
        weight: float,
        is_successful: bool,
        judge_decisions: Sequence[JudgeVote],
        metadata: Optional[Dict[str, Any]] = None
    ) -> AttemptScore:
        """심판 판정으로 시기 채점"""

    @abstractmethod
    def calculate_ranking(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        category_rules: Union[CategoryRules, Dict[str, Any], None] = None
    ) -> List[RankingResult]:
        """카테고리 내 순위 계산 (1위부터 정렬)"""

    @abstractmethod
    def propose_next_attempt(
        self,
        athlete_id: str,
        discipline: str,
        previous_attempts: Sequence[Attempt],
        competition_context: Optional[Dict[str, Any]] = None
    ) -> NextAttemptSuggestion:
        """다음 시기 중량 제안"""

    # =====================================================
    # 동점 처리
    # =====================================================

    def event_wins(self, athlete_id: str, attempts: Sequence[Attempt]) -> int:
        """세부 종목 1위 횟수 (가장 무거운 성공 시기 기준)"""
        wins = 0
        for discipline in self.disciplines:
            best = {}
            for a in attempts:
                if a.discipline == discipline and a.is_successful():
                    best[a.athlete_id] = max(best.get(a.athlete_id, 0), a.actual_weight)
            if athlete_id in best and best[athlete_id] == max(best.values()):
                wins += 1
        return wins

    def _tiebreak_keys(
        self,
        attempts: Sequence[Attempt]
    ) -> Dict[str, Callable[[Athlete], Any]]:
        def earliest_total(athlete: Athlete):
            times = [
                a.timestamp for a in attempts
                if a.athlete_id == athlete.id and a.is_successful()
            ]
            return max(times).timestamp() if times else _LAST

        return {
            "bodyweight": lambda a: a.bodyweight if a.bodyweight is not None else _LAST,
            "lot_number": lambda a: a.lot_number if a.lot_number is not None else _LAST,
            "event_wins": lambda a: -self.event_wins(a.id, attempts),
            "earliest_total": earliest_total,
        }

    def resolve_tiebreak(
        self,
        tied_athletes: Sequence[Athlete],
        attempts: Sequence[Attempt] = (),
        tiebreak_rules: Union[TiebreakRules, Dict[str, Any], None] = None
    ) -> TiebreakResult:
        """
        동점자 순서 결정

        Args:
            tied_athletes: 동점 선수 목록 (입력 순서가 최종 대체 기준)
            attempts: 전체 시기 (event_wins, earliest_total 기준에 사용)
            tiebreak_rules: 적용 기준 (기본값: 종목별 default_tiebreak)

        Returns:
            TiebreakResult (winner_id, 결정 기준, 기준별 값, 최종 순서)
        """
        if not tied_athletes:
            raise ValueError("resolve_tiebreak requires at least one athlete")

        if isinstance(tiebreak_rules, dict):
            tiebreak_rules = TiebreakRules(**tiebreak_rules)
        criteria = list(tiebreak_rules.criteria) if tiebreak_rules else list(self.default_tiebreak)

        keys = self._tiebreak_keys(attempts)
        selected = [keys[c] for c in criteria]
        ordered = sorted(tied_athletes, key=lambda a: tuple(k(a) for k in selected))

        # 1위와 2위를 가른 첫 기준
        deciding = "fallback"
        if len(ordered) > 1:
            for name, key in zip(criteria, selected):
                if key(ordered[0]) != key(ordered[1]):
                    deciding = name
                    break

        details = {
            name: {a.id: _display(name, key(a)) for a in ordered}
            for name, key in zip(criteria, selected)
        }
        logger.debug(
            f"{self.sport_name} tiebreak {[a.id for a in ordered]} by {deciding}"
        )
        return TiebreakResult(
            winner_id=ordered[0].id,
            criteria=deciding,
            details=details,
            order=[a.id for a in ordered],
        )

    # =====================================================
    # 랭킹 공통
    # =====================================================

    def _sort_and_rank(
        self,
        results: List[RankingResult],
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        sort_key: Callable[[RankingResult], Any]
    ) -> List[RankingResult]:
        """점수 내림차순 정렬 후 동점 그룹은 resolve_tiebreak 순서 적용"""
        by_id = {a.id: a for a in athletes}
        ordered = sorted(results, key=sort_key, reverse=True)

        final: List[RankingResult] = []
        for _, group in groupby(ordered, key=sort_key):
            group = list(group)
            if len(group) > 1:
                tied = [by_id[r.athlete_id] for r in group]
                order = self.resolve_tiebreak(tied, attempts).order
                position = {athlete_id: i for i, athlete_id in enumerate(order)}
                group.sort(key=lambda r: position[r.athlete_id])
            final.extend(group)

        for rank, result in enumerate(final, 1):
            result.rank = rank
        return final

    def _coefficient_score(
        self,
        total: float,
        athlete: Athlete,
        rules: CategoryRules
    ) -> float:
        if rules.coefficient == "none":
            return round(total, 2)
        if total <= 0:
            return 0
        if not athlete.bodyweight:
            logger.warning(
                f"{self.sport_name}: bodyweight missing for {athlete.id}, "
                f"{rules.coefficient} score set to 0"
            )
            return 0
        return coefficients.calculate(
            rules.coefficient, total, athlete.bodyweight, athlete.gender, rules.equipment
        )

    # =====================================================
    # 공통 도우미
    # =====================================================

    @staticmethod
    def discipline_attempts(
        attempts: Sequence[Attempt],
        discipline: str,
        athlete_id: Optional[str] = None
    ) -> List[Attempt]:
        """세부 종목 시기 (시기 번호 순)"""
        selected = [
            a for a in attempts
            if a.discipline == discipline and (athlete_id is None or a.athlete_id == athlete_id)
        ]
        return sorted(selected, key=lambda a: a.attempt_number)

    @classmethod
    def attempt_history(
        cls,
        attempts: Sequence[Attempt],
        discipline: str,
        athlete_id: str
    ) -> List[Attempt]:
        """선수의 세부 종목 시기 이력 (패스한 시기 제외)"""
        return [
            a for a in cls.discipline_attempts(attempts, discipline, athlete_id)
            if a.status != AttemptStatus.SKIPPED
        ]

    @staticmethod
    def best_successful(attempts: Sequence[Attempt], discipline: str) -> Optional[Attempt]:
        """가장 무거운 성공 시기"""
        successful = [a for a in attempts if a.discipline == discipline and a.is_successful()]
        if not successful:
            return None
        return max(successful, key=lambda a: a.actual_weight)

    def best_lift(self, attempts: Sequence[Attempt], discipline: str) -> float:
        best = self.best_successful(attempts, discipline)
        return best.actual_weight if best else 0

    def is_bombed_out(self, attempts: Sequence[Attempt], discipline: str) -> bool:
        """모든 시기를 실패 또는 패스한 경우 (진행 중인 세부 종목은 제외)"""
        used = [
            a for a in attempts
            if a.discipline == discipline
            and (a.is_completed() or a.status == AttemptStatus.SKIPPED)
        ]
        return len(used) >= self.max_attempts and not any(a.is_successful() for a in used)

    def round_to_increment(self, weight: float, increment: Optional[float] = None) -> float:
        step = increment or self.plate_increment
        return round(round(weight / step) * step, 2)

    def is_increment_multiple(self, weight: float, increment: Optional[float] = None) -> bool:
        step = increment or self.plate_increment
        return abs(weight / step - round(weight / step)) < 1e-6

    def personal_best(
        self,
        competition_context: Optional[Dict[str, Any]],
        discipline: str,
        default: Optional[float] = None
    ) -> float:
        """대회 컨텍스트의 개인 최고 기록 (없으면 기본값)"""
        context = competition_context or {}
        bests = context.get("athlete_personal_bests") or {}
        value = bests.get(discipline)
        if value:
            return float(value)
        athlete = context.get("athlete")
        if isinstance(athlete, Athlete) and athlete.personal_record(discipline):
            return athlete.personal_record(discipline)
        return default if default is not None else get_settings().default_personal_best

    def _common_errors(self, discipline: str, attempt_number: int) -> List[str]:
        errors = []
        if not self.supports(discipline):
            errors.append(f"Unsupported discipline: {discipline}")
        if attempt_number < 1 or attempt_number > self.max_attempts:
            errors.append(f"Attempt number must be between 1 and {self.max_attempts}")
        return errors

    def get_attempt_order(
        self,
        attempts: Sequence[Attempt],
        athletes: Optional[Sequence[Athlete]] = None
    ) -> List[Attempt]:
        """경기 순서: 중량 오름차순, 시기 번호, 로트 번호"""
        lots = {a.id: a.lot_number for a in athletes or []}

        def order_key(attempt: Attempt):
            lot = lots.get(attempt.athlete_id)
            return (attempt.actual_weight, attempt.attempt_number, lot if lot is not None else _LAST)

        return sorted(attempts, key=order_key)

    def generate_categories(self) -> List[str]:
        return []

    def get_timer_settings(self, discipline: str = "default", phase: str = "attempt") -> TimerSettings:
        """세부 종목 타이머 설정"""
        if phase not in TIMER_PHASES:
            raise ValueError(f"Unknown timer phase: {phase} (valid: {', '.join(TIMER_PHASES)})")
        attempt_time, rest_time, warmup_time = self.timer_defaults
        settings = {
            "attempt_time": attempt_time,
            "rest_time": rest_time,
            "warmup_time": warmup_time,
        }
        settings.update(self.timer_overrides.get(discipline, {}))
        return TimerSettings(**settings)


def _display(criterion: str, value: Any) -> Any:
    if value == _LAST:
        return None
    # event_wins 는 정렬을 위해 음수로 저장
    return -value if criterion == "event_wins" else value
