"""
심판 판정 집계

백색등(True) / 적색등(False) 다수결 판정
"""
from typing import Optional, Sequence, Tuple

from .errors import JudgeCountError
from .models import JudgeDecision, JudgeVote


def _as_bool(vote: JudgeVote) -> bool:
    if isinstance(vote, JudgeDecision):
        return vote.decision
    return bool(vote)


def count_lights(decisions: Sequence[JudgeVote]) -> Tuple[int, int]:
    """(백색등 수, 적색등 수)"""
    white = sum(1 for d in decisions if _as_bool(d))
    return white, len(decisions) - white


def majority_approves(
    decisions: Sequence[JudgeVote],
    panel_size: Optional[int] = None
) -> bool:
    """
    심판단 과반 승인 여부

    Args:
        decisions: 판정 목록
        panel_size: 심판단 규모 (기본값: 판정 수)

    Returns:
        백색등이 심판단의 절반을 초과하면 True
    """
    if not decisions:
        return False
    size = panel_size if panel_size is not None else len(decisions)
    white, _ = count_lights(decisions)
    return white > size / 2


def require_panel(decisions: Sequence[JudgeVote], required: int, discipline: str) -> None:
    """판정 수가 요구 심판 수와 다르면 JudgeCountError"""
    if len(decisions) != required:
        raise JudgeCountError(discipline, required, len(decisions))


def decisions_as_bools(decisions: Sequence[JudgeVote]) -> list:
    return [_as_bool(d) for d in decisions]
