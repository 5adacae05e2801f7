"""
파워리프팅 플러그인

- 세부 종목: 스쿼트 / 벤치프레스 / 데드리프트, 각 3시기
- 심판 3명, 백색등 2개 이상이면 성공
- 합계 + 계수(Wilks / DOTS / IPF GL) 랭킹
"""
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

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
from ..weight_classes import IPF_MEN_CLASSES, IPF_WOMEN_CLASSES
from .base import SportPlugin, coerce_category_rules

# 성공 후 다음 시기 증량 (직전 시기 번호 -> kg)
NEXT_ATTEMPT_INCREMENTS = {1: 7.5, 2: 5.0}

OPENER_RATIO = 0.9
REQUIRED_JUDGES = 3


class PowerliftingPlugin(SportPlugin):
    """파워리프팅"""

    sport_name = "powerlifting"
    display_name = "Powerlifting"
    version = "1.0.0"
    disciplines = ("squat", "bench", "deadlift")

    max_attempts = 3
    plate_increment = 2.5

    timer_defaults = (60, 300, 120)
    timer_overrides = {"deadlift": {"attempt_time": 90}}

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
        elif not self.is_increment_multiple(weight):
            errors.append(f"Weight must be a multiple of {self.plate_increment}kg")

        history = self.attempt_history(previous_attempts or [], discipline, athlete_id)

        if any(a.attempt_number == attempt_number for a in history):
            errors.append(f"Attempt {attempt_number} already declared for {discipline}")

        earlier = [a for a in history if a.attempt_number < attempt_number]
        if earlier:
            last = earlier[-1]
            if last.is_successful():
                if weight <= last.actual_weight:
                    errors.append("Weight must be higher than previous successful attempt")
                elif weight - last.actual_weight < self.plate_increment:
                    errors.append(f"Minimum increment: {self.plate_increment}kg")
            elif weight < last.actual_weight:
                errors.append("Weight cannot be lower than previous attempt")

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
        """백색등 2/3 이상이면 중량만큼 득점 (is_successful 은 판정에 사용하지 않음)"""
        if not self.supports(discipline):
            raise UnsupportedDisciplineError(self.sport_name, discipline)
        require_panel(judge_decisions, REQUIRED_JUDGES, discipline)

        white_flags, red_flags = count_lights(judge_decisions)
        is_valid = white_flags >= 2
        logger.debug(
            f"{athlete_id} {discipline} {weight}kg: {white_flags} white / {red_flags} red"
        )
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
        rules = coerce_category_rules(category_rules)
        results: List[RankingResult] = []

        for athlete in athletes:
            athlete_attempts = [a for a in attempts if a.athlete_id == athlete.id]

            lifts = {d: self.best_lift(athlete_attempts, d) for d in self.disciplines}
            bombed_out = any(self.is_bombed_out(athlete_attempts, d) for d in self.disciplines)
            total = 0 if bombed_out else sum(lifts.values())

            breakdown = dict(lifts)
            breakdown["total"] = total
            breakdown["coefficient_score"] = self._coefficient_score(total, athlete, rules)
            breakdown["bombed_out"] = 1.0 if bombed_out else 0.0

            results.append(RankingResult(
                athlete_id=athlete.id,
                total_score=total,
                breakdown=breakdown,
            ))

        if rules.rank_by == "coefficient":
            sort_key = lambda r: r.breakdown["coefficient_score"]
        else:
            sort_key = lambda r: r.total_score

        ranked = self._sort_and_rank(results, athletes, attempts, sort_key)
        logger.info(
            f"{self.sport_name} ranking: {len(ranked)} athletes "
            f"(rank_by={rules.rank_by}, coefficient={rules.coefficient})"
        )
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
                reasoning="Suggested opener (90% of personal best)",
                confidence=0.8,
            )

        last = history[-1]
        if len(history) >= self.max_attempts:
            return NextAttemptSuggestion(
                suggested_weight=last.actual_weight,
                reasoning=f"All {self.max_attempts} attempts used for {discipline}",
                confidence=0.0,
            )

        if last.is_successful():
            increment = NEXT_ATTEMPT_INCREMENTS.get(len(history), self.plate_increment * 2)
            return NextAttemptSuggestion(
                suggested_weight=last.actual_weight + increment,
                reasoning=f"Increase after successful attempt (+{increment:g}kg)",
                confidence=0.7,
            )

        return NextAttemptSuggestion(
            suggested_weight=last.actual_weight,
            reasoning="Repeat weight after failed attempt",
            confidence=0.6,
        )

    def generate_categories(self) -> List[str]:
        men = [f"M {wc.name}" for wc in IPF_MEN_CLASSES]
        women = [f"F {wc.name}" for wc in IPF_WOMEN_CLASSES]
        return men + women
