"""
Pytest configuration and fixtures for sport rules engine tests
"""

import pytest
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sport_rules.models import (
    Athlete,
    Attempt,
    AttemptResult,
    AttemptStatus,
    Gender,
    JudgeDecision,
)

BASE_TIME = datetime(2025, 5, 10, 10, 0, 0)


def build_attempt(
    athlete_id: str,
    discipline: str,
    attempt_number: int,
    weight: float,
    success=None,
    decisions=None,
    metadata=None,
    minutes: int = 0,
    status=None,
) -> Attempt:
    """
    테스트용 시기 생성

    - success=None, decisions=None: 신고 상태
    - success=True/False: 심판 3명 만장일치 판정으로 완료
    - decisions=[True, False, ...]: 해당 판정으로 완료
    """
    result = None
    if decisions is None and success is not None:
        decisions = [success] * 3
    if decisions is not None:
        judge_decisions = [
            JudgeDecision(judge_id=f"judge_{i}", decision=d)
            for i, d in enumerate(decisions, 1)
        ]
        white = sum(1 for d in decisions if d)
        is_successful = white > len(decisions) / 2 if success is None else success
        result = AttemptResult(
            is_successful=is_successful,
            judge_decisions=judge_decisions,
            white_flags=white,
            red_flags=len(decisions) - white,
        )

    if status is None:
        status = AttemptStatus.COMPLETED if result else AttemptStatus.DECLARED

    return Attempt(
        id=f"{athlete_id}-{discipline}-{attempt_number}",
        athlete_id=athlete_id,
        discipline=discipline,
        attempt_number=attempt_number,
        declared_weight=weight,
        actual_weight=weight,
        result=result,
        metadata=metadata or {},
        status=status,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def make_attempt():
    """시기 팩토리"""
    return build_attempt


@pytest.fixture
def athlete_kim():
    return Athlete(
        id="kim",
        name="김민수",
        gender=Gender.MALE,
        bodyweight=82.5,
        birth_date=date(1995, 3, 15),
        team="서울바벨",
        lot_number=3,
        personal_records={"squat": 220.0, "bench": 150.0, "deadlift": 260.0},
    )


@pytest.fixture
def athlete_lee():
    return Athlete(
        id="lee",
        name="이준호",
        gender=Gender.MALE,
        bodyweight=80.0,
        birth_date=date(1990, 8, 1),
        team="부산파워",
        lot_number=7,
    )


@pytest.fixture
def athlete_park():
    return Athlete(
        id="park",
        name="박서연",
        gender=Gender.FEMALE,
        bodyweight=60.0,
        birth_date=date(2001, 1, 20),
        team="대전역도",
        lot_number=1,
    )


@pytest.fixture
def athletes(athlete_kim, athlete_lee, athlete_park):
    return [athlete_kim, athlete_lee, athlete_park]


@pytest.fixture
def sample_competition_data():
    """파워리프팅 대회 입력 데이터"""
    return {
        "sport": "powerlifting",
        "name": "2025 서울 오픈",
        "category_rules": {"coefficient": "dots", "rank_by": "total"},
        "athletes": [
            {"id": "kim", "name": "김민수", "gender": "M", "bodyweight": 82.5, "lot_number": 3,
             "team": "서울바벨", "personal_records": {"squat": 220}},
            {"id": "lee", "name": "이준호", "gender": "M", "bodyweight": 80.0, "lot_number": 7},
        ],
        "attempts": [
            {"athlete_id": "kim", "discipline": "squat", "attempt_number": 1,
             "declared_weight": 200, "judge_decisions": [True, True, False]},
            {"athlete_id": "kim", "discipline": "bench", "attempt_number": 1,
             "declared_weight": 140, "judge_decisions": [True, True, True]},
            {"athlete_id": "kim", "discipline": "deadlift", "attempt_number": 1,
             "declared_weight": 240, "judge_decisions": [True, True, True]},
            {"athlete_id": "lee", "discipline": "squat", "attempt_number": 1,
             "declared_weight": 190, "judge_decisions": [True, True, True]},
            {"athlete_id": "lee", "discipline": "bench", "attempt_number": 1,
             "declared_weight": 130, "judge_decisions": [True, False, False]},
            {"athlete_id": "lee", "discipline": "deadlift", "attempt_number": 1,
             "declared_weight": 250, "judge_decisions": [True, True, True]},
        ],
    }
