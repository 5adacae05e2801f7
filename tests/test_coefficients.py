"""
체급 보정 계수 테스트
- Wilks / DOTS / IPF GL / Sinclair 기준값
- 0 이하 입력, 체중 범위 보정
"""
import pytest

from sport_rules import coefficients
from sport_rules.models import Equipment, Gender


class TestCoefficientValues:
    """공식 기준값"""

    def test_wilks_male(self):
        assert coefficients.wilks(600, 100, Gender.MALE) == pytest.approx(365.2, abs=0.1)

    def test_dots_male(self):
        assert coefficients.dots(600, 100, Gender.MALE) == pytest.approx(369.3, abs=0.1)

    def test_dots_female(self):
        """여자 60kg DOTS 계수 약 1.1086"""
        assert coefficients.dots(100, 60, Gender.FEMALE) == pytest.approx(110.86, abs=0.05)

    def test_ipf_gl_raw_male(self):
        assert coefficients.ipf_gl(600, 100, Gender.MALE, Equipment.RAW) == pytest.approx(75.8, abs=0.1)

    def test_ipf_gl_equipment_changes_score(self):
        raw = coefficients.ipf_gl(600, 100, "M", "raw")
        equipped = coefficients.ipf_gl(600, 100, "M", "equipped")
        assert raw != equipped

    def test_sinclair_male(self):
        assert coefficients.sinclair(300, 100, Gender.MALE) == pytest.approx(332.6, abs=0.1)

    def test_sinclair_above_reference_bodyweight(self):
        """기준 체중 이상이면 계수 1"""
        assert coefficients.sinclair(300, 180, Gender.MALE) == 300

    def test_results_rounded_to_two_decimals(self):
        score = coefficients.dots(612.5, 91.3, Gender.MALE)
        assert score == round(score, 2)

    def test_gender_string_accepted(self):
        assert coefficients.wilks(500, 75, "F") == coefficients.wilks(500, 75, Gender.FEMALE)


class TestCoefficientEdgeCases:
    """경계 입력"""

    @pytest.mark.parametrize("func", [
        coefficients.wilks,
        coefficients.dots,
        coefficients.ipf_gl,
        coefficients.sinclair,
    ])
    @pytest.mark.parametrize("total, bodyweight", [(0, 80), (-10, 80), (500, 0), (500, -1)])
    def test_non_positive_input_scores_zero(self, func, total, bodyweight):
        assert func(total, bodyweight, Gender.MALE) == 0

    def test_bodyweight_clamped_to_formula_range(self):
        assert coefficients.wilks(600, 250, Gender.MALE) == coefficients.wilks(600, 201.9, Gender.MALE)
        assert coefficients.dots(400, 30, Gender.FEMALE) == coefficients.dots(400, 40, Gender.FEMALE)

    def test_heavier_lifter_same_total_scores_lower(self):
        light = coefficients.dots(600, 74, Gender.MALE)
        heavy = coefficients.dots(600, 105, Gender.MALE)
        assert light > heavy


class TestCalculate:
    """이름으로 계산"""

    def test_none_returns_total(self):
        assert coefficients.calculate("none", 612.5, 90, Gender.MALE) == 612.5

    @pytest.mark.parametrize("name", ["wilks", "dots", "ipf_gl", "sinclair"])
    def test_dispatch(self, name):
        expected = getattr(coefficients, name)(550, 83, Gender.MALE)
        assert coefficients.calculate(name, 550, 83, Gender.MALE) == expected

    def test_unknown_coefficient(self):
        with pytest.raises(ValueError, match="Unknown coefficient"):
            coefficients.calculate("glossbrenner", 500, 80, Gender.MALE)

    def test_calculate_all(self):
        scores = coefficients.calculate_all(600, 100, Gender.MALE)
        assert set(scores) == {"wilks", "dots", "ipf_gl", "sinclair"}
        assert scores["dots"] == pytest.approx(369.3, abs=0.1)
