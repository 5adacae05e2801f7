"""
종목 플러그인 레지스트리 테스트
"""
import pytest

from sport_rules.errors import PluginAlreadyRegisteredError, PluginNotFoundError
from sport_rules.plugins import PowerliftingPlugin, SportPlugin
from sport_rules.registry import (
    SportPluginRegistry,
    get_plugin_for_sport,
    get_registry,
    get_sport_from_discipline,
    validate_sport_and_discipline,
)


class BenchOnlyPlugin(PowerliftingPlugin):
    """벤치프레스 단일 종목 대회"""
    sport_name = "bench_only"
    display_name = "Bench Press Only"
    disciplines = ("bench",)


@pytest.fixture
def registry():
    return SportPluginRegistry()


class TestLookup:
    """조회"""

    def test_builtin_sports(self, registry):
        assert registry.get_supported_sports() == [
            "powerlifting", "weightlifting", "strongman", "crossfit", "streetlifting",
        ]
        assert len(registry) == 5
        assert "crossfit" in registry

    def test_get_plugin(self, registry):
        plugin = registry.get_plugin("powerlifting")
        assert isinstance(plugin, SportPlugin)
        assert plugin.sport_name == "powerlifting"

    def test_unknown_sport(self, registry):
        with pytest.raises(PluginNotFoundError) as exc:
            registry.get_plugin("curling")
        assert exc.value.sport == "curling"
        assert str(exc.value) == "No plugin registered for sport: curling"

    def test_unknown_sport_is_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.get_plugin("curling")

    def test_get_all_plugins_returns_copy(self, registry):
        plugins = registry.get_all_plugins()
        plugins.pop("powerlifting")
        assert registry.is_valid_sport("powerlifting")

    def test_disciplines(self, registry):
        assert registry.get_disciplines_for_sport("weightlifting") == ["snatch", "clean_and_jerk"]
        all_disciplines = registry.get_all_disciplines()
        assert all_disciplines["streetlifting"] == ["squat", "bench_press", "deadlift"]
        assert "murph" in all_disciplines["crossfit"]

    def test_timer_settings(self, registry):
        timer = registry.get_timer_settings_for_sport("powerlifting", "deadlift")
        assert timer.attempt_time == 90
        with pytest.raises(PluginNotFoundError):
            registry.get_timer_settings_for_sport("curling")

    @pytest.mark.parametrize("sport, discipline, expected", [
        ("powerlifting", "squat", True),
        ("powerlifting", "snatch", False),
        ("crossfit", "fran", True),
        ("curling", "squat", False),
    ])
    def test_validate_sport_discipline(self, registry, sport, discipline, expected):
        assert registry.validate_sport_discipline(sport, discipline) is expected

    @pytest.mark.parametrize("discipline, expected", [
        ("squat", "powerlifting"),
        ("deadlift", "powerlifting"),
        ("snatch", "weightlifting"),
        ("farmers_walk", "strongman"),
        ("fran", "crossfit"),
        ("bench_press", "streetlifting"),
        ("curl", None),
    ])
    def test_sport_from_discipline(self, registry, discipline, expected):
        assert registry.get_sport_from_discipline(discipline) == expected


class TestRegisterPlugin:
    """사용자 정의 플러그인 등록"""

    def test_register_custom(self, registry):
        registry.register_plugin("bench_only", BenchOnlyPlugin())
        assert registry.is_valid_sport("bench_only")
        assert registry.get_disciplines_for_sport("bench_only") == ["bench"]

    def test_duplicate_rejected(self, registry):
        with pytest.raises(PluginAlreadyRegisteredError):
            registry.register_plugin("powerlifting", BenchOnlyPlugin())

    def test_replace(self, registry):
        replacement = BenchOnlyPlugin()
        registry.register_plugin("powerlifting", replacement, replace=True)
        assert registry.get_plugin("powerlifting") is replacement

    def test_non_plugin_rejected(self, registry):
        with pytest.raises(TypeError):
            registry.register_plugin("chess", object())

    def test_empty_registry(self):
        registry = SportPluginRegistry(load_builtins=False)
        assert registry.get_supported_sports() == []
        assert registry.get_sport_from_discipline("squat") is None


class TestMetadata:

    def test_plugin_metadata(self, registry):
        meta = registry.get_plugin_metadata("strongman")
        assert meta["sport_name"] == "strongman"
        assert meta["display_name"] == "Strongman"
        assert meta["version"] == "1.0.0"
        assert "atlas_stones" in meta["supported_disciplines"]
        assert meta["timer"] == {"attempt_time": 60, "rest_time": 300, "warmup_time": 1200}

    def test_all_metadata(self, registry):
        assert set(registry.get_all_plugins_metadata()) == set(registry.get_supported_sports())


class TestModuleHelpers:
    """전역 레지스트리 도우미"""

    def test_singleton(self):
        assert get_registry() is get_registry()

    def test_helpers(self):
        assert get_plugin_for_sport("weightlifting").sport_name == "weightlifting"
        assert validate_sport_and_discipline("strongman", "tire_flip")
        assert get_sport_from_discipline("clean_and_jerk") == "weightlifting"
