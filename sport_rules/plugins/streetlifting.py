"""
스트리트리프팅 플러그인

- 세부 종목: 스쿼트 / 벤치프레스 / 데드리프트, 각 3시기
- 합계 + Wilks 계수
"""
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from .. import coefficients
from ..errors import UnsupportedDisciplineError
from ..models import Athlete, Attempt, JudgeVote
from ..schemas import (
    AttemptScore,
    AttemptValidation,
    CategoryRules,
    NextAttemptSuggestion,
    RankingResult,
)
from ..voting import count_lights, decisions_as_bools, require_panel
from .base import SportPlugin

REQUIRED_JUDGES = 3
OPENER_RATIO = 0.87

# 성공 후 증량 (직전 시기 번호 -> kg)
SUCCESS_INCREMENTS = {1: 5.0, 2: 7.5}
FAILURE_DECREMENT = 2.5


class StreetliftingPlugin(SportPlugin):
    """스트리트리프팅"""

    sport_name = "streetlifting"
    display_name = "Streetlifting"
    version = "1.0.0"
    disciplines = ("squat", "bench_press", "deadlift")

    max_attempts = 3
    plate_increment = 2.5

    timer_defaults = (60, 180, 600)
    default_tiebreak = ("bodyweight",)

    def validate_attempt(
        self,
        athlete_id: str,
        discipline: str,
        weight: float,
        attempt_number: int,
        previous_attempts: Sequence[Attempt]
    ) -> AttemptValidation:
        errors = self._common_errors(discipline, attempt_number)
        if weight <= 0:
            errors.append("Weight must be greater than zero")
        return AttemptValidation.from_errors(errors)

    def score_attempt(
        self,
        athlete_id: str,
        discipline: str,
        weight: float,
        is_successful: bool,
        judge_decisions: Sequence[JudgeVote],
        metadata: Optional[Dict[str, Any]] = None
    ) -> AttemptScore:
        if not self.supports(discipline):
            raise UnsupportedDisciplineError(self.sport_name, discipline)
        require_panel(judge_decisions, REQUIRED_JUDGES, discipline)

        white_flags, red_flags = count_lights(judge_decisions)
        is_valid = white_flags >= 2
        return AttemptScore(
            points=weight if is_valid else 0,
            is_valid=is_valid,
            metadata={
                "white_flags": white_flags,
                "red_flags": red_flags,
                "judge_decisions": decisions_as_bools(judge_decisions),
            },
        )

    def calculate_ranking(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        category_rules: Union[CategoryRules, Dict[str, Any], None] = None
    ) -> List[RankingResult]:
        results: List[RankingResult] = []

        for athlete in athletes:
            athlete_attempts = [a for a in attempts if a.athlete_id == athlete.id]
            breakdown = {d: self.best_lift(athlete_attempts, d) for d in self.disciplines}
            total = sum(breakdown.values())

            wilks = 0
            if total and athlete.bodyweight:
                wilks = coefficients.wilks(total, athlete.bodyweight, athlete.gender)
            breakdown["total"] = total
            breakdown["wilks"] = wilks

            results.append(RankingResult(athlete_id=athlete.id, total_score=total, breakdown=breakdown))

        ranked = self._sort_and_rank(results, athletes, attempts, lambda r: r.total_score)
        logger.info(f"{self.sport_name} ranking: {len(ranked)} athletes")
        return ranked

    def propose_next_attempt(
        self,
        athlete_id: str,
        discipline: str,
        previous_attempts: Sequence[Attempt],
        competition_context: Optional[Dict[str, Any]] = None
    ) -> NextAttemptSuggestion:
        history = self.attempt_history(previous_attempts or [], discipline, athlete_id)

        if not history:
            personal_best = self.personal_best(competition_context, discipline)
            return NextAttemptSuggestion(
                suggested_weight=self.round_to_increment(personal_best * OPENER_RATIO),
                reasoning="Conservative opener (87% of personal best)",
                confidence=0.9,
            )

        last = history[-1]
        if len(history) >= self.max_attempts:
            return NextAttemptSuggestion(
                suggested_weight=last.actual_weight,
                reasoning=f"All {self.max_attempts} attempts used for {discipline}",
                confidence=0.0,
            )

        if last.is_successful():
            increment = SUCCESS_INCREMENTS[len(history)]
            suggested = last.actual_weight + increment
            reasoning = f"Successful attempt - add {increment:g}kg"
        else:
            suggested = max(last.actual_weight - FAILURE_DECREMENT, self.plate_increment)
            reasoning = f"Failed attempt - reduce by {FAILURE_DECREMENT:g}kg"

        return NextAttemptSuggestion(
            suggested_weight=self.round_to_increment(suggested),
            reasoning=reasoning,
            confidence=0.8,
        )
