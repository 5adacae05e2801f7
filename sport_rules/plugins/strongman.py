"""
스트롱맨 플러그인

이벤트 유형:
- 중량 (deadlift, squat, overhead_press, log_press, axle_deadlift): 무거울수록 우수
- 시간 (farmers_walk, yoke_walk, truck_pull): 빠를수록 우수
- 반복/거리 (atlas_stones, tire_flip): 많을수록 우수

이벤트별 순위 포인트(1위 N점 ~ N위 1점, 동순위는 평균)를 합산
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
from ..voting import count_lights, decisions_as_bools, majority_approves, require_panel
from .base import SportPlugin

WEIGHT_EVENTS = ("deadlift", "squat", "overhead_press", "log_press", "axle_deadlift")
TIME_EVENTS = ("farmers_walk", "yoke_walk", "truck_pull")
REPS_EVENTS = ("atlas_stones", "tire_flip")

# 심판 3명이 필요한 이벤트 (나머지는 1명)
MULTI_JUDGE_EVENTS = ("overhead_press", "squat")

OPENER_RATIO = 0.85
DEFAULT_PERSONAL_BEST = 200.0
SUCCESS_INCREMENT = 10.0
FAILURE_DECREMENT = 5.0


class StrongmanPlugin(SportPlugin):
    """스트롱맨"""

    sport_name = "strongman"
    display_name = "Strongman"
    version = "1.0.0"
    disciplines = (
        "deadlift", "squat", "overhead_press", "farmers_walk",
        "yoke_walk", "atlas_stones", "tire_flip", "truck_pull",
        "log_press", "axle_deadlift",
    )

    max_attempts = 3
    plate_increment = 2.5

    timer_defaults = (60, 300, 1200)
    default_tiebreak = ("event_wins", "bodyweight")

    # ---------- 이벤트 분류 ----------

    @staticmethod
    def event_type(discipline: str) -> str:
        if discipline in WEIGHT_EVENTS:
            return "weight"
        if discipline in TIME_EVENTS:
            return "time"
        return "reps"

    def max_attempts_for(self, discipline: str) -> int:
        return self.max_attempts if discipline in WEIGHT_EVENTS else 1

    @staticmethod
    def required_judges(discipline: str) -> int:
        return 3 if discipline in MULTI_JUDGE_EVENTS else 1

    def performance(self, attempt: Attempt) -> Optional[float]:
        """시기 성과값 (시간 이벤트는 초, 그 외는 클수록 우수)"""
        kind = self.event_type(attempt.discipline)
        if kind == "weight":
            return attempt.actual_weight
        if kind == "time":
            seconds = attempt.performance("time_in_seconds")
            return seconds if seconds and seconds > 0 else None
        return attempt.performance(
            "reps_completed",
            attempt.performance("reps", attempt.performance("distance")),
        )

    def best_performance(self, attempts: Sequence[Attempt], discipline: str) -> Optional[float]:
        values = [
            self.performance(a) for a in attempts
            if a.discipline == discipline and a.is_successful()
        ]
        values = [v for v in values if v is not None]
        if not values:
            return None
        return min(values) if self.event_type(discipline) == "time" else max(values)

    def event_points(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        discipline: str
    ) -> Dict[str, float]:
        """
        이벤트 순위 포인트

        Returns:
            {athlete_id: points} - 성공 기록이 없으면 0점
        """
        field_size = len(athletes)
        performances = {}
        for athlete in athletes:
            own = [a for a in attempts if a.athlete_id == athlete.id]
            best = self.best_performance(own, discipline)
            if best is not None:
                performances[athlete.id] = best

        lower_is_better = self.event_type(discipline) == "time"
        ordered = sorted(performances.items(), key=lambda kv: kv[1], reverse=not lower_is_better)

        points = {athlete.id: 0.0 for athlete in athletes}
        position = 1
        i = 0
        while i < len(ordered):
            # 동일 기록 그룹
            j = i
            while j < len(ordered) and ordered[j][1] == ordered[i][1]:
                j += 1
            span = [field_size - p + 1 for p in range(position, position + (j - i))]
            shared = sum(span) / len(span)
            for athlete_id, _ in ordered[i:j]:
                points[athlete_id] = shared
            position += j - i
            i = j
        return points

    def event_wins(self, athlete_id: str, attempts: Sequence[Attempt]) -> int:
        wins = 0
        for discipline in self.disciplines:
            bests = {}
            for athlete in {a.athlete_id for a in attempts}:
                own = [a for a in attempts if a.athlete_id == athlete]
                best = self.best_performance(own, discipline)
                if best is not None:
                    bests[athlete] = best
            if athlete_id not in bests:
                continue
            if self.event_type(discipline) == "time":
                winning = min(bests.values())
            else:
                winning = max(bests.values())
            if bests[athlete_id] == winning:
                wins += 1
        return wins

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
            errors.append(f"Unsupported discipline: {discipline}")
            return AttemptValidation.from_errors(errors)

        limit = self.max_attempts_for(discipline)
        if attempt_number < 1 or attempt_number > limit:
            errors.append(f"Attempt number must be between 1 and {limit} for {discipline}")

        if self.event_type(discipline) == "weight" and weight <= 0:
            errors.append("Weight must be greater than zero")
        elif weight < 0:
            errors.append("Weight cannot be negative")

        history = self.attempt_history(previous_attempts or [], discipline, athlete_id)
        if any(a.attempt_number == attempt_number for a in history):
            errors.append(f"Attempt {attempt_number} already declared for {discipline}")

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
        """심판 판정으로 성공 여부 결정 후 이벤트 유형별 점수"""
        if not self.supports(discipline):
            raise UnsupportedDisciplineError(self.sport_name, discipline)

        required = self.required_judges(discipline)
        require_panel(judge_decisions, required, discipline)
        is_valid = majority_approves(judge_decisions, required)

        metadata = metadata or {}
        kind = self.event_type(discipline)
        if not is_valid:
            points = 0.0
        elif kind == "weight":
            points = weight
        elif kind == "time":
            seconds = float(metadata.get("time_in_seconds") or 0)
            points = round(1000 / seconds, 2) if seconds > 0 else 0.0
        else:
            performed = next(
                (metadata[key] for key in ("reps_completed", "reps", "distance")
                 if metadata.get(key) is not None),
                1,
            )
            points = float(performed)

        white_flags, red_flags = count_lights(judge_decisions)
        return AttemptScore(
            points=points,
            is_valid=is_valid,
            metadata={
                "event_type": kind,
                "white_flags": white_flags,
                "red_flags": red_flags,
                "judge_decisions": decisions_as_bools(judge_decisions),
                "platform": metadata.get("platform", "default"),
            },
        )

    def calculate_ranking(
        self,
        athletes: Sequence[Athlete],
        attempts: Sequence[Attempt],
        category_rules: Union[CategoryRules, Dict[str, Any], None] = None
    ) -> List[RankingResult]:
        contested = [d for d in self.disciplines if any(a.discipline == d for a in attempts)]
        points_by_event = {d: self.event_points(athletes, attempts, d) for d in contested}

        results: List[RankingResult] = []
        for athlete in athletes:
            breakdown = {d: points_by_event[d][athlete.id] for d in contested}
            total = round(sum(breakdown.values()), 2)
            breakdown["total"] = total
            results.append(RankingResult(athlete_id=athlete.id, total_score=total, breakdown=breakdown))

        ranked = self._sort_and_rank(results, athletes, attempts, lambda r: r.total_score)
        logger.info(f"{self.sport_name} ranking: {len(ranked)} athletes, {len(contested)} events")
        return ranked

    def propose_next_attempt(
        self,
        athlete_id: str,
        discipline: str,
        previous_attempts: Sequence[Attempt],
        competition_context: Optional[Dict[str, Any]] = None
    ) -> NextAttemptSuggestion:
        history = self.attempt_history(previous_attempts or [], discipline, athlete_id)
        is_weight_event = self.event_type(discipline) == "weight"

        if not history:
            if not is_weight_event:
                implement = float((competition_context or {}).get("implement_weight", 0))
                return NextAttemptSuggestion(
                    suggested_weight=implement,
                    reasoning="Fixed implement weight for this event",
                    confidence=0.5,
                )
            personal_best = self.personal_best(
                competition_context, discipline, default=DEFAULT_PERSONAL_BEST
            )
            return NextAttemptSuggestion(
                suggested_weight=self.round_to_increment(personal_best * OPENER_RATIO),
                reasoning="First attempt - 85% of personal record",
                confidence=0.8,
            )

        last = history[-1]
        if not is_weight_event:
            return NextAttemptSuggestion(
                suggested_weight=last.declared_weight,
                reasoning="Same implement - aim to improve time or reps",
                confidence=0.7,
            )

        if last.is_successful():
            suggested = last.actual_weight + SUCCESS_INCREMENT
            reasoning = f"Successful attempt - increase weight (+{SUCCESS_INCREMENT:g}kg)"
        else:
            suggested = max(last.declared_weight - FAILURE_DECREMENT, 0)
            reasoning = f"Failed attempt - reduce weight (-{FAILURE_DECREMENT:g}kg)"

        return NextAttemptSuggestion(
            suggested_weight=suggested,
            reasoning=reasoning,
            confidence=0.7,
        )
