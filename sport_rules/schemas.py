"""
플러그인 결과 스키마

Pydantic 모델로 플러그인 연산의 반환 타입을 정의
"""
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field, field_validator

CoefficientName = Literal["none", "wilks", "dots", "ipf_gl", "sinclair"]

# 동점 처리 기준
TIEBREAK_CRITERIA = ("bodyweight", "lot_number", "event_wins", "earliest_total")


class AttemptValidation(BaseModel):
    """시기 검증 결과"""
    is_valid: bool = Field(default=True, description="최종 유효성")
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "AttemptValidation":
        return cls(is_valid=len(errors) == 0, errors=list(errors))


class AttemptScore(BaseModel):
    """시기 채점 결과"""
    points: float = Field(..., description="획득 점수")
    is_valid: bool = Field(..., description="판정 성공 여부")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RankingResult(BaseModel):
    """선수별 순위"""
    athlete_id: str
    rank: int = Field(default=0, ge=0)
    total_score: float = Field(default=0.0)
    breakdown: Dict[str, float] = Field(default_factory=dict)


class NextAttemptSuggestion(BaseModel):
    """다음 시기 중량 제안"""
    suggested_weight: float = Field(..., ge=0, description="제안 중량 (kg)")
    reasoning: str = Field(..., description="제안 근거")
    confidence: float = Field(..., ge=0, le=1, description="신뢰도 (0-1)")


class TiebreakResult(BaseModel):
    """동점 처리 결과"""
    winner_id: str
    criteria: str
    details: Dict[str, Any] = Field(default_factory=dict)
    order: List[str] = Field(default_factory=list, description="동점자 최종 순서")


class TimerSettings(BaseModel):
    """타이머 설정 (초)"""
    attempt_time: int = Field(..., gt=0)
    rest_time: int = Field(..., gt=0)
    warmup_time: int = Field(..., gt=0)


class CategoryRules(BaseModel):
    """카테고리 랭킹 규칙"""
    coefficient: CoefficientName = Field(default="dots", description="적용 계수")
    equipment: Literal["raw", "equipped"] = Field(default="raw")
    rank_by: Literal["total", "coefficient"] = Field(default="total")


class TiebreakRules(BaseModel):
    """동점 처리 규칙 (앞 기준부터 순서대로 적용)"""
    criteria: List[str] = Field(default_factory=lambda: ["bodyweight", "lot_number"])

    @field_validator("criteria")
    @classmethod
    def validate_criteria(cls, v: List[str]) -> List[str]:
        unknown = [c for c in v if c not in TIEBREAK_CRITERIA]
        if unknown:
            raise ValueError(
                f"Unknown tiebreak criteria: {', '.join(unknown)} "
                f"(valid: {', '.join(TIEBREAK_CRITERIA)})"
            )
        return v
