"""
크로스핏 플러그인

WOD 유형:
- for_time / chipper: 기록(초 + 페널티)이 짧을수록 우수, 타임캡 선수는 완주자 뒤에서 반복 수로 비교
- amrap: 라운드 + 반복 수가 많을수록 우수
- custom: 메타데이터 score (없으면 중량)가 높을수록 우수

WOD별 순위 포인트(유효 기록 수 - 순위 + 1)를 합산
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

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
from ..voting import count_lights, decisions_as_bools, majority_approves, require_panel
from .base import SportPlugin

FOR_TIME_WODS = ("fran", "grace", "helen", "isabel", "jackie", "diane", "elizabeth", "nancy")
AMRAP_WODS = ("cindy", "annie")
CHIPPER_WODS = ("murph", "karen")

# 심판 2명이 필요한 WOD (나머지는 1명)
HIGH_STAKES_WODS = ("murph", "fran", "grace")


class CrossFitPlugin(SportPlugin):
    """크로스핏"""

    sport_name = "crossfit"
    display_name = "CrossFit"
    version = "1.0.0"
    disciplines = (
        "fran", "grace", "helen", "murph", "cindy", "annie", "karen",
        "isabel", "jackie", "diane", "elizabeth", "nancy", "custom_wod",
    )

    max_attempts = 1
    plate_increment = 2.5

    timer_defaults = (1200, 600, 900)
    default_tiebreak = ("event_wins",)

    # ---------- WOD 분류 ----------

    @staticmethod
    def wod_type(discipline: str) -> str:
        if discipline in FOR_TIME_WODS:
            return "for_time"
        if discipline in AMRAP_WODS:
            return "amrap"
        if discipline in CHIPPER_WODS:
            return "chipper"
        return "custom"

    @staticmethod
    def required_judges(discipline: str) -> int:
        return 2 if discipline in HIGH_STAKES_WODS else 1

    def is_timed(self, discipline: str) -> bool:
        return self.wod_type(discipline) in ("for_time", "chipper")

    def performance_key(self, attempt: Attempt) -> Tuple[float, float]:
        """정렬 키 (클수록 우수)"""
        if self.is_timed(attempt.discipline):
            seconds = attempt.performance("time_in_seconds")
            if seconds:
                penalties = attempt.performance("penalties", 0)
                return (1, -(seconds + penalties))
            # 타임캡 - 완주자 뒤, 반복 수 비교
            return (0, attempt.performance("reps_completed", 0))
        if self.wod_type(attempt.discipline) == "amrap":
            return (attempt.performance("rounds", 0), attempt.performance("reps_completed", 0))
        return (attempt.performance("score", attempt.actual_weight), 0)

    def wod_placements(self, attempts: Sequence[Attempt], discipline: str) -> Dict[str, int]:
        """
        WOD 순위 (동일 기록은 같은 순위, 다음 순위는 건너뜀)

        Returns:
            {athlete_id: placement} - 유효 기록이 있는 선수만
        """
        best: Dict[str, Tuple[float, float]] = {}
        for attempt in attempts:
            if attempt.discipline != discipline or not attempt.is_successful():
                continue
            key = self.performance_key(attempt)
            if attempt.athlete_id not in best or key > best[attempt.athlete_id]:
                best[attempt.athlete_id] = key

        ordered = sorted(best.items(), key=lambda kv: kv[1], reverse=True)
        placements: Dict[str, int] = {}
        for index, (athlete_id, key) in enumerate(ordered):
            if index and key == ordered[index - 1][1]:
                placements[athlete_id] = placements[ordered[index - 1][0]]
            else:
                placements[athlete_id] = index + 1
        return placements

    def event_wins(self, athlete_id: str, attempts: Sequence[Attempt]) -> int:
        return sum(
            1 for d in self.disciplines
            if self.wod_placements(attempts, d).get(athlete_id) == 1
        )

    # ---------- 플러그인 연산 ----------

    def validate_attempt(
        self,
        athlete_id: str,
        discipline: str,
        weight: float,
        attempt_number: int,
        previous_attempts: Sequence[Attempt]
    ) -> AttemptValidation:
        errors = []

        if not self.supports(discipline):
            errors.append(f"Invalid WOD: {discipline}")

        same_wod = [
            a for a in previous_attempts or []
            if a.discipline == discipline and a.athlete_id == athlete_id
        ]
        if same_wod:
            errors.append(f"Only one attempt allowed per WOD: {discipline}")

        if weight < 0:
            errors.append("Weight cannot be negative")

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
        """보고된 완료 여부와 심판 과반 승인이 모두 필요"""
        if not self.supports(discipline):
            raise UnsupportedDisciplineError(self.sport_name, discipline)

        required = self.required_judges(discipline)
        require_panel(judge_decisions, required, discipline)
        is_valid = bool(is_successful) and majority_approves(judge_decisions, required)

        metadata = metadata or {}
        wod_type = self.wod_type(discipline)
        penalties = float(metadata.get("penalties") or 0)
        time_in_seconds = metadata.get("time_in_seconds")
        reps_completed = metadata.get("reps_completed")
        time_capped = False

        if wod_type in ("for_time", "chipper"):
            if time_in_seconds:
                points = float(time_in_seconds) + penalties
                higher_is_better = False
            else:
                time_capped = True
                points = float(reps_completed or 0)
                higher_is_better = True
        elif wod_type == "amrap":
            points = float(reps_completed if reps_completed is not None else metadata.get("rounds") or 0)
            higher_is_better = True
        else:
            points = float(metadata.get("score", weight) or 0)
            higher_is_better = True

        white_flags, _ = count_lights(judge_decisions)
        return AttemptScore(
            points=points if is_valid else 0,
            is_valid=is_valid,
            metadata={
                "wod_type": wod_type,
                "higher_is_better": higher_is_better,
                "time_capped": time_capped,
                "judge_decisions": decisions_as_bools(judge_decisions),
                "white_flags": white_flags,
                "time_in_seconds": time_in_seconds,
                "reps_completed": reps_completed,
                "rounds": metadata.get("rounds"),
                "scaling": metadata.get("scaling"),
                "penalties": penalties,
            },
        )

    def calculate_ranking(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        category_rules: Union[CategoryRules, Dict[str, Any], None] = None
    ) -> List[RankingResult]:
        athlete_ids = {a.id for a in athletes}
        field_attempts = [a for a in attempts if a.athlete_id in athlete_ids]

        placements = {d: self.wod_placements(field_attempts, d) for d in self.disciplines}

        results: List[RankingResult] = []
        for athlete in athletes:
            breakdown: Dict[str, float] = {}
            for discipline, placed in placements.items():
                placement = placed.get(athlete.id)
                breakdown[discipline] = float(len(placed) - placement + 1) if placement else 0.0
            total = sum(breakdown.values())
            results.append(RankingResult(athlete_id=athlete.id, total_score=total, breakdown=breakdown))

        ranked = self._sort_and_rank(results, athletes, field_attempts, lambda r: r.total_score)
        logger.info(f"{self.sport_name} ranking: {len(ranked)} athletes")
        return ranked

    def propose_next_attempt(
        self,
        athlete_id: str,
        discipline: str,
        previous_attempts: Sequence[Attempt],
        competition_context: Optional[Dict[str, Any]] = None
    ) -> NextAttemptSuggestion:
        """다음 WOD 제안 (중량 제안 없음)"""
        context = competition_context or {}
        completed = {a.discipline for a in previous_attempts or [] if a.athlete_id == athlete_id}
        next_wod = next((wod for wod in self.disciplines if wod not in completed), None)

        if next_wod is None:
            return NextAttemptSuggestion(
                suggested_weight=0,
                reasoning="All WODs completed - suggest a custom WOD",
                confidence=0.5,
            )

        scaling = context.get("scaling", "Scaled")
        return NextAttemptSuggestion(
            suggested_weight=0,
            reasoning=f"Next WOD: {next_wod} with scaling {scaling}",
            confidence=0.7,
        )
