"""
경기 도메인 엔티티

- Athlete: 선수 (체중, 로트 번호, 개인 최고 기록)
- Attempt: 시기 (신고 중량 / 실제 중량 / 심판 판정)
- 시기 상태 전이는 항상 새 인스턴스를 반환 (불변 객체)
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import InvalidAttemptError, InvalidStateError


# =====================================================
# Enum
# =====================================================

class Gender(str, Enum):
    """성별"""
    MALE = "M"
    FEMALE = "F"

    @classmethod
    def from_string(cls, value: str) -> "Gender":
        """문자열에서 성별 추출 (M/F, male/female)"""
        value_lower = (value or "").strip().lower()
        if value_lower in ("f", "female", "w", "women", "woman"):
            return cls.FEMALE
        if value_lower in ("m", "male", "men", "man"):
            return cls.MALE
        raise ValueError(f"Unknown gender: {value}")


class AttemptStatus(str, Enum):
    """시기 진행 상태"""
    DECLARED = "declared"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class Equipment(str, Enum):
    """장비 구분 (IPF GL 계수용)"""
    RAW = "raw"
    EQUIPPED = "equipped"


# 중량 변경 최소 단위 (kg)
MIN_WEIGHT_CHANGE = 2.5

# 시기 번호 허용 범위 (종목별 제한은 플러그인에서 검증)
MAX_ATTEMPT_NUMBER = 5


# =====================================================
# 심판 판정
# =====================================================

@dataclass(frozen=True)
class JudgeDecision:
    """심판 1명의 판정 (True = 백색등)"""
    judge_id: str
    decision: bool
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class AttemptResult:
    """판정 집계 결과"""
    is_successful: bool
    judge_decisions: List[JudgeDecision]
    white_flags: int
    red_flags: int
    processed_at: datetime = field(default_factory=datetime.now)

    @property
    def final_decision(self) -> bool:
        return self.is_successful


JudgeVote = Union[bool, JudgeDecision]


# =====================================================
# 시기
# =====================================================

@dataclass(frozen=True)
class Attempt:
    """선수의 단일 시기"""
    id: str
    athlete_id: str
    discipline: str
    attempt_number: int
    declared_weight: float
    actual_weight: float
    result: Optional[AttemptResult] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: AttemptStatus = AttemptStatus.DECLARED
    event_id: str = ""
    session_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not str(self.id).strip():
            raise InvalidAttemptError("Attempt ID is required")
        if not str(self.athlete_id).strip():
            raise InvalidAttemptError("Athlete ID is required")
        if not str(self.discipline).strip():
            raise InvalidAttemptError("Discipline is required")

        if not 1 <= self.attempt_number <= MAX_ATTEMPT_NUMBER:
            raise InvalidAttemptError(
                f"Attempt number must be between 1 and {MAX_ATTEMPT_NUMBER}"
            )

        # 무게가 없는 종목(WOD 등)은 0 허용
        if self.declared_weight < 0:
            raise InvalidAttemptError("Declared weight cannot be negative")
        if self.actual_weight < 0:
            raise InvalidAttemptError("Actual weight cannot be negative")

        weight_diff = abs(self.actual_weight - self.declared_weight)
        if 0 < weight_diff < MIN_WEIGHT_CHANGE:
            raise InvalidAttemptError(
                f"Weight changes must be at least {MIN_WEIGHT_CHANGE}kg"
            )

        # 문자열로 들어온 상태값 정규화
        if not isinstance(self.status, AttemptStatus):
            object.__setattr__(self, "status", AttemptStatus(self.status))

    # ---------- 조회 ----------

    def is_completed(self) -> bool:
        return self.status == AttemptStatus.COMPLETED and self.result is not None

    def is_successful(self) -> bool:
        return self.result is not None and self.result.is_successful

    def get_score(self) -> float:
        return self.actual_weight if self.is_successful() else 0

    def performance(self, key: str, default: Optional[float] = None) -> Optional[float]:
        """메타데이터의 수치 성과 값 (시간, 반복 수, 거리 등)"""
        value = self.metadata.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def summary(self) -> str:
        if self.is_completed():
            status = "✓" if self.is_successful() else "✗"
        else:
            status = self.status.value
        weight = f"{self.actual_weight:g}"
        return f"{self.discipline} #{self.attempt_number}: {weight}kg [{status}]"

    # ---------- 상태 전이 ----------

    def start(self) -> "Attempt":
        if self.status != AttemptStatus.DECLARED:
            raise InvalidStateError("Can only start declared attempts")
        return replace(self, status=AttemptStatus.IN_PROGRESS)

    def complete(self, judge_decisions: List[JudgeDecision]) -> "Attempt":
        """판정 집계 후 완료 처리 (과반 백색등이면 성공)"""
        if self.status != AttemptStatus.IN_PROGRESS:
            raise InvalidStateError("Can only complete in-progress attempts")
        if len(judge_decisions) < 3:
            raise InvalidStateError("At least 3 judge decisions required")

        white_flags = sum(1 for d in judge_decisions if d.decision)
        red_flags = len(judge_decisions) - white_flags
        result = AttemptResult(
            is_successful=white_flags > len(judge_decisions) / 2,
            judge_decisions=list(judge_decisions),
            white_flags=white_flags,
            red_flags=red_flags,
        )
        return replace(self, result=result, status=AttemptStatus.COMPLETED)

    def skip(self) -> "Attempt":
        if self.status == AttemptStatus.COMPLETED:
            raise InvalidStateError("Cannot skip completed attempts")
        return replace(self, status=AttemptStatus.SKIPPED)

    def update_weight(self, new_weight: float) -> "Attempt":
        if self.status != AttemptStatus.DECLARED:
            raise InvalidStateError("Can only update weight for declared attempts")
        return replace(self, actual_weight=new_weight)

    def with_metadata(self, **metadata: Any) -> "Attempt":
        return replace(self, metadata={**self.metadata, **metadata})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "athlete_id": self.athlete_id,
            "discipline": self.discipline,
            "attempt_number": self.attempt_number,
            "declared_weight": self.declared_weight,
            "actual_weight": self.actual_weight,
            "status": self.status.value,
            "is_successful": self.is_successful(),
            "metadata": dict(self.metadata),
            "event_id": self.event_id,
            "session_id": self.session_id,
            "timestamp": self.timestamp.isoformat(),
        }


# =====================================================
# 선수
# =====================================================

# (상한 나이, 카테고리) - 상한 미만이면 해당 카테고리
AGE_CATEGORIES = [
    (18, "Junior"),
    (24, "Sub-Junior"),
    (40, "Open"),
    (50, "Master 1"),
    (60, "Master 2"),
    (70, "Master 3"),
]


@dataclass(frozen=True)
class Athlete:
    """선수 정보"""
    id: str
    name: str
    gender: Gender = Gender.MALE
    bodyweight: Optional[float] = None
    birth_date: Optional[date] = None
    federation: str = ""
    team: str = ""
    lot_number: Optional[int] = None
    personal_records: Dict[str, float] = field(default_factory=dict)
    weight_class: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.gender, Gender):
            object.__setattr__(self, "gender", Gender.from_string(self.gender))

    def age(self, on: Optional[date] = None) -> Optional[int]:
        """기준일(기본 오늘) 만 나이"""
        if self.birth_date is None:
            return None
        today = on or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def age_category(self, on: Optional[date] = None) -> str:
        age = self.age(on)
        if age is None:
            return "Open"
        for limit, category in AGE_CATEGORIES:
            if age < limit:
                return category
        return "Master 4"

    def personal_record(self, discipline: str) -> Optional[float]:
        return self.personal_records.get(discipline)

    def update_personal_record(self, discipline: str, weight: float) -> "Athlete":
        """더 무거운 기록일 때만 갱신한 새 Athlete 반환"""
        current = self.personal_records.get(discipline)
        if current is not None and weight <= current:
            return self
        records = {**self.personal_records, discipline: weight}
        return replace(self, personal_records=records)
