"""
대회 입력 데이터 로더

JSON(dict) -> Pydantic 스키마 검증 -> 도메인 모델(Athlete / Attempt)

입력 형식:
    {
        "sport": "powerlifting",
        "name": "2025 Open",
        "category_rules": {"coefficient": "dots", "rank_by": "total"},
        "context": {"scaling": "RX"},
        "athletes": [{"id": "a1", "name": "Kim", "gender": "M", "bodyweight": 82.5}],
        "attempts": [
            {"athlete_id": "a1", "discipline": "squat", "attempt_number": 1,
             "declared_weight": 200, "judge_decisions": [true, true, false]}
        ]
    }
"""
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import CompetitionDataError, InvalidAttemptError
from .models import (
    MAX_ATTEMPT_NUMBER,
    Athlete,
    Attempt,
    AttemptResult,
    AttemptStatus,
    Gender,
    JudgeDecision,
)
from .plugins import SportPlugin
from .registry import get_registry
from .schemas import CategoryRules


# ==================== 입력 스키마 ====================

class AthleteSchema(BaseModel):
    """선수 입력"""
    id: str = Field(..., min_length=1, description="선수 ID")
    name: str = Field(..., min_length=1, description="선수명")
    gender: str = Field(default="M", description="M / F")
    bodyweight: Optional[float] = Field(None, gt=0, description="계체 체중 (kg)")
    birth_date: Optional[date] = None
    federation: str = ""
    team: str = ""
    lot_number: Optional[int] = Field(None, ge=1, description="로트 번호")
    personal_records: Dict[str, float] = Field(default_factory=dict)
    weight_class: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """공백 정리"""
        return " ".join(v.split())

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v: str) -> str:
        return Gender.from_string(v).value

    def to_model(self) -> Athlete:
        return Athlete(**self.model_dump())


class JudgeDecisionSchema(BaseModel):
    """심판 판정 입력 (bool 단축 표기 허용)"""
    judge_id: str = Field(..., min_length=1)
    decision: bool
    reason: Optional[str] = None

    def to_model(self) -> JudgeDecision:
        return JudgeDecision(judge_id=self.judge_id, decision=self.decision, reason=self.reason)


class AttemptSchema(BaseModel):
    """시기 입력"""
    id: Optional[str] = None
    athlete_id: str = Field(..., min_length=1)
    discipline: str = Field(..., min_length=1)
    attempt_number: int = Field(..., ge=1, le=MAX_ATTEMPT_NUMBER)
    declared_weight: float = Field(default=0, ge=0)
    actual_weight: Optional[float] = Field(None, ge=0, description="미입력 시 신고 중량")
    status: Optional[AttemptStatus] = None
    is_successful: Optional[bool] = Field(None, description="심판 판정이 없을 때의 보고 결과")
    judge_decisions: List[JudgeDecisionSchema] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None

    @field_validator("judge_decisions", mode="before")
    @classmethod
    def expand_bool_decisions(cls, v: Any) -> Any:
        """[true, false, ...] -> [{"judge_id": "judge_1", "decision": true}, ...]"""
        if not isinstance(v, list):
            return v
        return [
            {"judge_id": f"judge_{i}", "decision": d} if isinstance(d, bool) else d
            for i, d in enumerate(v, 1)
        ]

    @model_validator(mode="after")
    def validate_result(self) -> "AttemptSchema":
        if self.status == AttemptStatus.COMPLETED and not self.judge_decisions and self.is_successful is None:
            raise ValueError("completed attempts need judge_decisions or is_successful")
        return self

    def to_model(self) -> Attempt:
        decisions = [d.to_model() for d in self.judge_decisions]

        result = None
        if decisions or self.is_successful is not None:
            white_flags = sum(1 for d in decisions if d.decision)
            red_flags = len(decisions) - white_flags
            if decisions:
                is_successful = white_flags > len(decisions) / 2
                # 보고된 실패(타임캡 초과 등)는 판정보다 우선
                if self.is_successful is False:
                    is_successful = False
            else:
                is_successful = bool(self.is_successful)
            result = AttemptResult(
                is_successful=is_successful,
                judge_decisions=decisions,
                white_flags=white_flags,
                red_flags=red_flags,
            )

        status = self.status or (AttemptStatus.COMPLETED if result else AttemptStatus.DECLARED)
        kwargs: Dict[str, Any] = {}
        if self.timestamp is not None:
            kwargs["timestamp"] = self.timestamp

        return Attempt(
            id=self.id or f"{self.athlete_id}-{self.discipline}-{self.attempt_number}",
            athlete_id=self.athlete_id,
            discipline=self.discipline,
            attempt_number=self.attempt_number,
            declared_weight=self.declared_weight,
            actual_weight=self.declared_weight if self.actual_weight is None else self.actual_weight,
            result=result,
            metadata=dict(self.metadata),
            status=status,
            **kwargs,
        )


class CompetitionSchema(BaseModel):
    """대회 입력 (종목 + 선수 + 시기)"""
    sport: str = Field(..., description="등록된 종목 이름")
    name: str = ""
    category_rules: Optional[CategoryRules] = None
    context: Dict[str, Any] = Field(default_factory=dict, description="다음 시기 제안용 대회 컨텍스트")
    athletes: List[AthleteSchema] = Field(default_factory=list)
    attempts: List[AttemptSchema] = Field(default_factory=list)

    @field_validator("sport")
    @classmethod
    def validate_sport(cls, v: str) -> str:
        v = v.strip().lower()
        registry = get_registry()
        if not registry.is_valid_sport(v):
            raise ValueError(
                f"unknown sport '{v}' (supported: {', '.join(registry.get_supported_sports())})"
            )
        return v

    @model_validator(mode="after")
    def validate_references(self) -> "CompetitionSchema":
        """세부 종목 소속 / 선수 참조 / 중복 ID 검증 (문제를 모두 모아서 보고)"""
        problems = []

        athlete_ids = [a.id for a in self.athletes]
        duplicates = sorted({i for i in athlete_ids if athlete_ids.count(i) > 1})
        if duplicates:
            problems.append(f"duplicate athlete ids: {', '.join(duplicates)}")

        plugin = get_registry().get_plugin(self.sport)
        known = set(athlete_ids)
        for index, attempt in enumerate(self.attempts):
            if not plugin.supports(attempt.discipline):
                problems.append(
                    f"attempts[{index}]: {self.sport} does not support discipline '{attempt.discipline}'"
                )
            if attempt.athlete_id not in known:
                problems.append(f"attempts[{index}]: unknown athlete '{attempt.athlete_id}'")

        if problems:
            raise ValueError("; ".join(problems))
        return self


# ==================== 로드 결과 ====================

@dataclass
class CompetitionData:
    """검증이 끝난 대회 데이터"""
    sport: str
    athletes: List[Athlete]
    attempts: List[Attempt]
    category_rules: Optional[CategoryRules] = None
    name: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def plugin(self) -> SportPlugin:
        return get_registry().get_plugin(self.sport)

    def get_athlete(self, athlete_id: str) -> Optional[Athlete]:
        return next((a for a in self.athletes if a.id == athlete_id), None)

    def context_for(self, athlete_id: str) -> Dict[str, Any]:
        """선수별 다음 시기 제안 컨텍스트 (개인 기록 포함)"""
        context = dict(self.context)
        athlete = self.get_athlete(athlete_id)
        if athlete is not None:
            context.setdefault("athlete", athlete)
            context.setdefault("athlete_personal_bests", dict(athlete.personal_records))
        return context


def _format_errors(error: ValidationError) -> List[str]:
    problems = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"])
        message = item["msg"]
        problems.append(f"{location}: {message}" if location else message)
    return problems


def load_competition(data: Dict[str, Any], source: Optional[str] = None) -> CompetitionData:
    """
    dict 형태의 대회 데이터를 검증 후 도메인 모델로 변환

    Raises:
        CompetitionDataError: 스키마 / 참조 / 시기 불변식 위반 (모든 문제 포함)
    """
    try:
        schema = CompetitionSchema(**data)
    except ValidationError as e:
        raise CompetitionDataError(_format_errors(e), source) from e

    problems = []
    attempts = []
    for index, attempt in enumerate(schema.attempts):
        try:
            attempts.append(attempt.to_model())
        except InvalidAttemptError as e:
            problems.append(f"attempts.{index}: {e}")
    if problems:
        raise CompetitionDataError(problems, source)

    athletes = [a.to_model() for a in schema.athletes]
    logger.info(
        f"Loaded {schema.sport} competition{f' {schema.name}' if schema.name else ''}: "
        f"{len(athletes)} athletes, {len(attempts)} attempts"
    )
    return CompetitionData(
        sport=schema.sport,
        athletes=athletes,
        attempts=attempts,
        category_rules=schema.category_rules,
        name=schema.name,
        context=schema.context,
    )


def load_competition_file(path: Union[str, Path]) -> CompetitionData:
    """JSON 파일에서 대회 데이터 로드"""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CompetitionDataError([f"invalid JSON: {e}"], str(path)) from e

    if not isinstance(data, dict):
        raise CompetitionDataError(["top-level JSON value must be an object"], str(path))
    return load_competition(data, source=str(path))
