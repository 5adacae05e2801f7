"""
sport-rules CLI 테스트
"""
import json

import pytest

from sport_rules.cli import build_parser, main


@pytest.fixture
def meet_file(tmp_path, sample_competition_data):
    path = tmp_path / "meet.json"
    path.write_text(json.dumps(sample_competition_data, ensure_ascii=False), encoding="utf-8")
    return path


class TestCommands:

    def test_sports(self, capsys):
        assert main(["sports"]) == 0
        out = capsys.readouterr().out
        for sport in ("powerlifting", "weightlifting", "strongman", "crossfit", "streetlifting"):
            assert sport in out
        assert "clean_and_jerk" in out

    def test_coefficients(self, capsys):
        assert main(["coefficients", "600", "100", "--gender", "M"]) == 0
        out = capsys.readouterr().out
        assert "dots" in out
        assert "369.3" in out

    def test_rank_table(self, capsys, meet_file):
        assert main(["rank", str(meet_file), "--top", "5"]) == 0
        out = capsys.readouterr().out
        assert "Powerlifting 2025 서울 오픈" in out
        assert out.index("김민수") < out.index("이준호")

    def test_rank_export(self, tmp_path, meet_file):
        output = tmp_path / "out" / "rankings.json"
        assert main(["rank", str(meet_file), "--output", str(output), "--coefficient", "wilks"]) == 0

        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported["meta"]["sport"] == "powerlifting"
        assert exported["meta"]["category_rules"]["coefficient"] == "wilks"
        assert exported["meta"]["total_athletes"] == 2
        first = exported["rankings"][0]
        assert first["rank"] == 1
        assert first["athlete_id"] == "kim"
        assert first["name"] == "김민수"
        assert first["total_score"] == 580

    def test_suggest(self, capsys, meet_file):
        assert main(["suggest", str(meet_file), "kim", "squat"]) == 0
        out = capsys.readouterr().out
        assert "kim squat: 207.5kg" in out


class TestErrors:
    """오류는 종료 코드 1"""

    def test_missing_file(self, tmp_path):
        assert main(["rank", str(tmp_path / "missing.json")]) == 1

    def test_invalid_data(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"sport": "curling"}), encoding="utf-8")
        assert main(["rank", str(path)]) == 1

    def test_unknown_athlete(self, meet_file):
        assert main(["suggest", str(meet_file), "ghost", "squat"]) == 1

    def test_unsupported_discipline(self, meet_file):
        assert main(["suggest", str(meet_file), "kim", "snatch"]) == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_gender_required_for_coefficients(self):
        with pytest.raises(SystemExit):
            main(["coefficients", "600", "100"])

    @pytest.mark.parametrize("top", ["0", "-3", "abc"])
    def test_top_must_be_positive(self, meet_file, top):
        with pytest.raises(SystemExit):
            main(["rank", str(meet_file), "--top", top])

    def test_top_one_limits_rows(self, capsys, meet_file):
        assert main(["rank", str(meet_file), "--top", "1"]) == 0
        out = capsys.readouterr().out
        assert "김민수" in out
        assert "이준호" not in out
