"""
역도 플러그인

- 세부 종목: 인상(snatch) / 용상(clean & jerk), 각 3시기, 1kg 단위
- 한 종목이라도 성공이 없으면 합계 없음
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
from ..voting import count_lights, decisions_as_bools, majority_approves, require_panel
from ..weight_classes import IWF_CLASSES
from .base import SportPlugin, coerce_category_rules

REFEREES = 3
OPENER_RATIO = 0.9
SUCCESS_INCREMENT = 3


class WeightliftingPlugin(SportPlugin):
    """역도"""

    sport_name = "weightlifting"
    display_name = "Weightlifting"
    version = "1.0.0"
    disciplines = ("snatch", "clean_and_jerk")

    max_attempts = 3
    plate_increment = 1.0

    timer_defaults = (60, 120, 900)

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
            errors.append("Weight must be a whole number of kilograms")

        history = self.attempt_history(previous_attempts or [], discipline, athlete_id)

        if any(a.attempt_number == attempt_number for a in history):
            errors.append(f"Attempt {attempt_number} already declared for {discipline}")

        earlier = [a for a in history if a.attempt_number < attempt_number]
        if earlier:
            last = earlier[-1]
            if weight < last.actual_weight:
                errors.append("Weight cannot be lower than previous attempt")
            elif last.is_successful() and weight < last.actual_weight + self.plate_increment:
                errors.append("Weight must be higher than previous successful attempt")

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
        """심판 판정이 있으면 3명 다수결, 없으면 보고된 성공 여부 사용"""
        if not self.supports(discipline):
            raise UnsupportedDisciplineError(self.sport_name, discipline)

        score_metadata: Dict[str, Any] = {}
        if judge_decisions:
            require_panel(judge_decisions, REFEREES, discipline)
            is_valid = majority_approves(judge_decisions)
            white_flags, red_flags = count_lights(judge_decisions)
            score_metadata = {
                "white_flags": white_flags,
                "red_flags": red_flags,
                "judge_decisions": decisions_as_bools(judge_decisions),
            }
        else:
            is_valid = bool(is_successful)

        return AttemptScore(
            points=weight if is_valid else 0,
            is_valid=is_valid,
            metadata=score_metadata,
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
            best_snatch = self.best_lift(athlete_attempts, "snatch")
            best_clean_jerk = self.best_lift(athlete_attempts, "clean_and_jerk")

            # 두 종목 모두 성공해야 합계 인정
            total = best_snatch + best_clean_jerk if best_snatch and best_clean_jerk else 0

            sinclair = 0
            if total and athlete.bodyweight:
                sinclair = coefficients.sinclair(total, athlete.bodyweight, athlete.gender)

            results.append(RankingResult(
                athlete_id=athlete.id,
                total_score=total,
                breakdown={
                    "snatch": best_snatch,
                    "clean_and_jerk": best_clean_jerk,
                    "total": total,
                    "sinclair": sinclair,
                },
            ))

        if rules.rank_by == "coefficient":
            sort_key = lambda r: r.breakdown["sinclair"]
        else:
            sort_key = lambda r: r.total_score

        ranked = self._sort_and_rank(results, athletes, attempts, sort_key)
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
                reasoning="First attempt - 90% of personal record",
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
            return NextAttemptSuggestion(
                suggested_weight=last.actual_weight + SUCCESS_INCREMENT,
                reasoning=f"Successful attempt - increase by {SUCCESS_INCREMENT}kg",
                confidence=0.7,
            )

        # 실패 후에는 중량을 낮출 수 없으므로 재도전
        return NextAttemptSuggestion(
            suggested_weight=last.actual_weight,
            reasoning="Failed attempt - retry the same weight",
            confidence=0.6,
        )

    def generate_categories(self) -> List[str]:
        return [wc.name for wc in IWF_CLASSES]
