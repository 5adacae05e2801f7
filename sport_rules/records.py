"""
기록(레코드) 관리

종목/세부종목/카테고리/체급/기록 등급별 현재 최고 기록을 메모리에서 관리
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from loguru import logger

RECORD_TYPES = ("world", "national", "regional", "local")

RecordKey = Tuple[str, str, str, str, str]


@dataclass(frozen=True)
class CompetitionRecord:
    """기록"""
    id: str
    athlete_id: str
    athlete_name: str
    sport: str
    discipline: str
    category: str
    weight_class: str
    weight: float
    record_type: str = "national"
    competition_id: str = ""
    set_at: datetime = field(default_factory=datetime.now)
    is_active: bool = True

    @property
    def key(self) -> RecordKey:
        return (self.sport, self.discipline, self.category, self.weight_class, self.record_type)


@dataclass(frozen=True)
class RecordCheck:
    """신기록 판정 결과"""
    is_new_record: bool
    current_record: Optional[CompetitionRecord] = None
    improvement: float = 0.0


def _validate_record_type(record_type: str) -> None:
    if record_type not in RECORD_TYPES:
        raise ValueError(
            f"Unknown record type: {record_type} (valid: {', '.join(RECORD_TYPES)})"
        )


class RecordBook:
    """기록 저장소 (메모리)"""

    def __init__(self, records: Optional[List[CompetitionRecord]] = None):
        self._records: List[CompetitionRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def records_for(
        self,
        sport: str,
        discipline: str,
        category: str,
        weight_class: str,
        record_type: str = "national",
        active_only: bool = True
    ) -> List[CompetitionRecord]:
        """조건에 맞는 기록 (무거운 순)"""
        key = (sport, discipline, category, weight_class, record_type)
        matches = [
            r for r in self._records
            if r.key == key and (r.is_active or not active_only)
        ]
        return sorted(matches, key=lambda r: r.weight, reverse=True)

    def active_records(self) -> List[CompetitionRecord]:
        return [r for r in self._records if r.is_active]

    def check_for_new_record(
        self,
        sport: str,
        discipline: str,
        category: str,
        weight_class: str,
        weight: float,
        record_type: str = "national"
    ) -> RecordCheck:
        """
        신기록 여부 확인

        기존 기록이 없으면 신기록이며 개선폭은 중량 자체
        """
        _validate_record_type(record_type)
        current = self.records_for(sport, discipline, category, weight_class, record_type)

        if not current:
            return RecordCheck(is_new_record=True, improvement=weight)

        best = current[0]
        is_new = weight > best.weight
        return RecordCheck(
            is_new_record=is_new,
            current_record=best,
            improvement=round(weight - best.weight, 2) if is_new else 0.0,
        )

    def register_record(
        self,
        athlete_id: str,
        athlete_name: str,
        sport: str,
        discipline: str,
        category: str,
        weight_class: str,
        weight: float,
        record_type: str = "national",
        competition_id: str = ""
    ) -> CompetitionRecord:
        """새 기록 등록 (같은 키의 기존 활성 기록은 비활성화)"""
        _validate_record_type(record_type)
        record = CompetitionRecord(
            id=str(uuid.uuid4()),
            athlete_id=athlete_id,
            athlete_name=athlete_name,
            sport=sport,
            discipline=discipline,
            category=category,
            weight_class=weight_class,
            weight=weight,
            record_type=record_type,
            competition_id=competition_id,
        )

        deactivated = 0
        for i, existing in enumerate(self._records):
            if existing.is_active and existing.key == record.key:
                self._records[i] = replace(existing, is_active=False)
                deactivated += 1

        self._records.append(record)
        logger.info(
            f"🏆 New {record_type} record: {athlete_name} {discipline} {weight}kg "
            f"({sport}/{category}/{weight_class}, replaced {deactivated})"
        )
        return record

    def to_dict(self) -> Dict[str, list]:
        return {
            "records": [
                {
                    "id": r.id,
                    "athlete_id": r.athlete_id,
                    "athlete_name": r.athlete_name,
                    "sport": r.sport,
                    "discipline": r.discipline,
                    "category": r.category,
                    "weight_class": r.weight_class,
                    "weight": r.weight,
                    "record_type": r.record_type,
                    "competition_id": r.competition_id,
                    "set_at": r.set_at.isoformat(),
                    "is_active": r.is_active,
                }
                for r in self._records
            ]
        }
