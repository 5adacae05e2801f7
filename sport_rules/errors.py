"""
스포츠 룰 엔진 예외 정의
"""
from typing import List, Optional


class SportRulesError(Exception):
    """룰 엔진 기본 예외"""


class PluginNotFoundError(SportRulesError, KeyError):
    """등록되지 않은 종목"""

    def __init__(self, sport: str):
        self.sport = sport
        super().__init__(f"No plugin registered for sport: {sport}")

    def __str__(self) -> str:
        return self.args[0]


class PluginAlreadyRegisteredError(SportRulesError):
    """이미 등록된 종목 플러그인"""

    def __init__(self, sport: str):
        self.sport = sport
        super().__init__(f"Plugin already registered for sport: {sport}")


class UnsupportedDisciplineError(SportRulesError, ValueError):
    """종목에서 지원하지 않는 세부 종목"""

    def __init__(self, sport: str, discipline: str):
        self.sport = sport
        self.discipline = discipline
        super().__init__(f"{sport} does not support discipline: {discipline}")


class JudgeCountError(SportRulesError, ValueError):
    """심판 판정 수 불일치"""

    def __init__(self, discipline: str, required: int, received: int):
        self.discipline = discipline
        self.required = required
        self.received = received
        super().__init__(
            f"{discipline} requires exactly {required} judges (received {received})"
        )


class InvalidAttemptError(SportRulesError, ValueError):
    """시기(Attempt) 엔티티 불변식 위반"""


class InvalidStateError(SportRulesError):
    """허용되지 않는 시기 상태 전이"""


class CompetitionDataError(SportRulesError, ValueError):
    """대회 입력 데이터 오류

    Args:
        problems: "필드 경로: 메시지" 형식의 오류 목록
    """

    def __init__(self, problems: List[str], source: Optional[str] = None):
        self.problems = problems
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(
            f"Invalid competition data{where}: " + "; ".join(problems)
        )
