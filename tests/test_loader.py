"""
대회 입력 데이터 로더 테스트
"""
import copy
import json

import pytest

from sport_rules.errors import CompetitionDataError
from sport_rules.loader import AttemptSchema, load_competition, load_competition_file
from sport_rules.models import AttemptStatus, Gender


class TestLoadCompetition:
    """dict -> CompetitionData"""

    def test_load(self, sample_competition_data):
        data = load_competition(sample_competition_data)
        assert data.sport == "powerlifting"
        assert data.name == "2025 서울 오픈"
        assert len(data.athletes) == 2
        assert len(data.attempts) == 6
        assert data.category_rules.coefficient == "dots"

        kim = data.get_athlete("kim")
        assert kim.gender is Gender.MALE
        assert kim.personal_record("squat") == 220

    def test_attempts_built_from_judge_lights(self, sample_competition_data):
        data = load_competition(sample_competition_data)
        squat = next(a for a in data.attempts if a.id == "kim-squat-1")
        assert squat.status == AttemptStatus.COMPLETED
        assert squat.is_successful()
        assert squat.result.white_flags == 2
        assert squat.actual_weight == 200

        failed = next(a for a in data.attempts if a.id == "lee-bench-1")
        assert not failed.is_successful()

    def test_loaded_data_ranks(self, sample_competition_data):
        data = load_competition(sample_competition_data)
        ranking = data.plugin.calculate_ranking(data.athletes, data.attempts, data.category_rules)
        assert [(r.athlete_id, r.total_score) for r in ranking] == [("kim", 580), ("lee", 440)]

    def test_sport_name_normalized(self, sample_competition_data):
        sample_competition_data["sport"] = " Powerlifting "
        assert load_competition(sample_competition_data).sport == "powerlifting"

    def test_context_for_athlete(self, sample_competition_data):
        sample_competition_data["context"] = {"scaling": "RX"}
        data = load_competition(sample_competition_data)
        context = data.context_for("kim")
        assert context["scaling"] == "RX"
        assert context["athlete_personal_bests"] == {"squat": 220}
        assert context["athlete"].id == "kim"


class TestInvalidInput:
    """입력 오류는 모두 CompetitionDataError"""

    def test_unknown_sport(self, sample_competition_data):
        sample_competition_data["sport"] = "curling"
        with pytest.raises(CompetitionDataError) as exc:
            load_competition(sample_competition_data)
        assert any(p.startswith("sport:") for p in exc.value.problems)
        assert "unknown sport" in str(exc.value)

    def test_reference_problems_listed_together(self, sample_competition_data):
        sample_competition_data["attempts"].append(
            {"athlete_id": "ghost", "discipline": "snatch", "attempt_number": 1, "declared_weight": 100}
        )
        with pytest.raises(CompetitionDataError) as exc:
            load_competition(sample_competition_data)
        message = str(exc.value)
        assert "unknown athlete 'ghost'" in message
        assert "does not support discipline 'snatch'" in message

    def test_duplicate_athletes(self, sample_competition_data):
        sample_competition_data["athletes"].append(copy.deepcopy(sample_competition_data["athletes"][0]))
        with pytest.raises(CompetitionDataError, match="duplicate athlete ids: kim"):
            load_competition(sample_competition_data)

    def test_field_errors(self, sample_competition_data):
        sample_competition_data["athletes"][0]["gender"] = "x"
        sample_competition_data["attempts"][0]["declared_weight"] = -5
        with pytest.raises(CompetitionDataError) as exc:
            load_competition(sample_competition_data)
        problems = exc.value.problems
        assert any(p.startswith("athletes.0.gender") for p in problems)
        assert any(p.startswith("attempts.0.declared_weight") for p in problems)

    def test_attempt_invariant_violation(self, sample_competition_data):
        sample_competition_data["attempts"][0]["actual_weight"] = 201
        with pytest.raises(CompetitionDataError) as exc:
            load_competition(sample_competition_data)
        assert exc.value.problems == ["attempts.0: Weight changes must be at least 2.5kg"]

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_competition({"athletes": []})


class TestAttemptSchema:
    """시기 입력 변환"""

    def test_reported_result_without_judges(self):
        attempt = AttemptSchema(
            athlete_id="a", discipline="snatch", attempt_number=1, declared_weight=80, is_successful=True
        ).to_model()
        assert attempt.is_successful()
        assert attempt.result.judge_decisions == []

    def test_reported_failure_overrides_lights(self):
        attempt = AttemptSchema(
            athlete_id="a", discipline="fran", attempt_number=1,
            judge_decisions=[True, True], is_successful=False,
        ).to_model()
        assert attempt.is_completed()
        assert not attempt.is_successful()

    def test_declared_attempt(self):
        attempt = AttemptSchema(athlete_id="a", discipline="squat", attempt_number=2, declared_weight=100).to_model()
        assert attempt.status == AttemptStatus.DECLARED
        assert attempt.result is None
        assert attempt.id == "a-squat-2"

    def test_judge_decision_objects(self):
        attempt = AttemptSchema(
            athlete_id="a", discipline="squat", attempt_number=1, declared_weight=100,
            judge_decisions=[
                {"judge_id": "head", "decision": True},
                {"judge_id": "side_1", "decision": False, "reason": "depth"},
                {"judge_id": "side_2", "decision": False, "reason": "depth"},
            ],
        ).to_model()
        assert not attempt.is_successful()
        assert attempt.result.judge_decisions[1].reason == "depth"

    def test_completed_without_result_rejected(self):
        with pytest.raises(ValueError):
            AttemptSchema(athlete_id="a", discipline="squat", attempt_number=1, status="completed")


class TestLoadCompetitionFile:
    """JSON 파일 로드"""

    def test_load_file(self, tmp_path, sample_competition_data):
        path = tmp_path / "meet.json"
        path.write_text(json.dumps(sample_competition_data, ensure_ascii=False), encoding="utf-8")
        assert len(load_competition_file(path).athletes) == 2

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CompetitionDataError, match="invalid JSON") as exc:
            load_competition_file(path)
        assert exc.value.source == str(path)

    def test_invalid_utf8(self, tmp_path):
        """UTF-8이 아닌 바이트도 CompetitionDataError로 변환"""
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"sport": "powerlifting", "name": "\xff\xfe"}')
        with pytest.raises(CompetitionDataError, match="invalid JSON"):
            load_competition_file(path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(CompetitionDataError, match="must be an object"):
            load_competition_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_competition_file(tmp_path / "missing.json")
