"""
스트리트리프팅 플러그인 테스트
"""
import pytest

from sport_rules.errors import JudgeCountError
from sport_rules.plugins import StreetliftingPlugin


@pytest.fixture
def plugin():
    return StreetliftingPlugin()


class TestValidateAttempt:

    def test_valid(self, plugin):
        assert plugin.validate_attempt("kim", "bench_press", 120, 1, []).is_valid

    def test_bench_is_not_a_streetlifting_discipline(self, plugin):
        result = plugin.validate_attempt("kim", "bench", 120, 1, [])
        assert "Unsupported discipline: bench" in result.errors

    def test_attempt_range_and_weight(self, plugin):
        result = plugin.validate_attempt("kim", "squat", -5, 4, [])
        assert "Attempt number must be between 1 and 3" in result.errors
        assert "Weight must be greater than zero" in result.errors


class TestScoreAttempt:

    def test_two_of_three(self, plugin):
        assert plugin.score_attempt("kim", "deadlift", 250, True, [False, True, True]).is_valid
        score = plugin.score_attempt("kim", "deadlift", 250, True, [False, False, True])
        assert not score.is_valid
        assert score.points == 0

    def test_three_judges_required(self, plugin):
        with pytest.raises(JudgeCountError):
            plugin.score_attempt("kim", "deadlift", 250, True, [True])


class TestCalculateRanking:

    def test_total_with_wilks(self, plugin, athlete_kim, athlete_lee, make_attempt):
        attempts = [
            make_attempt("kim", "squat", 1, 200, success=True),
            make_attempt("kim", "bench_press", 1, 140, success=True),
            make_attempt("kim", "deadlift", 1, 240, success=False),
            make_attempt("lee", "squat", 1, 180, success=True),
            make_attempt("lee", "bench_press", 1, 120, success=True),
            make_attempt("lee", "deadlift", 1, 230, success=True),
        ]
        ranking = plugin.calculate_ranking([athlete_kim, athlete_lee], attempts)
        assert [r.athlete_id for r in ranking] == ["lee", "kim"]
        lee, kim = ranking
        assert lee.total_score == 530
        assert kim.total_score == 340
        assert kim.breakdown["deadlift"] == 0
        assert lee.breakdown["wilks"] > 0

    def test_tie_goes_to_lighter_athlete(self, plugin, athlete_kim, athlete_lee, make_attempt):
        attempts = [
            make_attempt("kim", "squat", 1, 200, success=True),
            make_attempt("lee", "squat", 1, 200, success=True),
        ]
        ranking = plugin.calculate_ranking([athlete_kim, athlete_lee], attempts)
        assert ranking[0].athlete_id == "lee"


class TestProposeNextAttempt:

    def test_conservative_opener(self, plugin):
        suggestion = plugin.propose_next_attempt("kim", "squat", [], {"athlete_personal_bests": {"squat": 200}})
        assert suggestion.suggested_weight == 175.0
        assert suggestion.confidence == 0.9

    def test_success_progression(self, plugin, make_attempt):
        first = [make_attempt("kim", "squat", 1, 175, success=True)]
        assert plugin.propose_next_attempt("kim", "squat", first).suggested_weight == 180

        second = first + [make_attempt("kim", "squat", 2, 180, success=True)]
        assert plugin.propose_next_attempt("kim", "squat", second).suggested_weight == 187.5

    def test_failure_reduces(self, plugin, make_attempt):
        history = [make_attempt("kim", "squat", 1, 175, success=False)]
        suggestion = plugin.propose_next_attempt("kim", "squat", history)
        assert suggestion.suggested_weight == 172.5
        assert suggestion.confidence == 0.8

    def test_suggestions_on_plate_increment(self, plugin, make_attempt):
        history = [make_attempt("kim", "squat", 1, 101, success=True)]
        weight = plugin.propose_next_attempt("kim", "squat", history).suggested_weight
        assert weight % 2.5 == 0

    def test_timer(self, plugin):
        timer = plugin.get_timer_settings()
        assert (timer.attempt_time, timer.rest_time, timer.warmup_time) == (60, 180, 600)
