"""
종목 플러그인 레지스트리

종목 이름으로 플러그인을 찾고, 세부 종목 / 타이머 / 메타데이터 조회를 제공
"""
from typing import Any, Dict, List, Optional

from loguru import logger

from .errors import PluginAlreadyRegisteredError, PluginNotFoundError
from .plugins import BUILTIN_PLUGINS, SportPlugin
from .schemas import TimerSettings


class SportPluginRegistry:
    """종목 이름 -> 플러그인"""

    def __init__(self, load_builtins: bool = True):
        self._plugins: Dict[str, SportPlugin] = {}
        if load_builtins:
            for plugin_cls in BUILTIN_PLUGINS:
                plugin = plugin_cls()
                self._plugins[plugin.sport_name] = plugin
            logger.debug(f"Registered built-in sports: {', '.join(self._plugins)}")

    def __contains__(self, sport: str) -> bool:
        return self.is_valid_sport(sport)

    def __len__(self) -> int:
        return len(self._plugins)

    # ---------- 조회 ----------

    def get_plugin(self, sport: str) -> SportPlugin:
        plugin = self._plugins.get(sport)
        if plugin is None:
            raise PluginNotFoundError(sport)
        return plugin

    def get_supported_sports(self) -> List[str]:
        return list(self._plugins)

    def get_all_plugins(self) -> Dict[str, SportPlugin]:
        return dict(self._plugins)

    def is_valid_sport(self, sport: str) -> bool:
        return sport in self._plugins

    def get_disciplines_for_sport(self, sport: str) -> List[str]:
        return self.get_plugin(sport).supported_disciplines

    def get_all_disciplines(self) -> Dict[str, List[str]]:
        return {sport: plugin.supported_disciplines for sport, plugin in self._plugins.items()}

    def get_timer_settings_for_sport(
        self,
        sport: str,
        discipline: str = "default",
        phase: str = "attempt"
    ) -> TimerSettings:
        return self.get_plugin(sport).get_timer_settings(discipline, phase)

    def validate_sport_discipline(self, sport: str, discipline: str) -> bool:
        """미등록 종목이면 False (예외 없음)"""
        plugin = self._plugins.get(sport)
        return plugin is not None and plugin.supports(discipline)

    def get_sport_from_discipline(self, discipline: str) -> Optional[str]:
        """세부 종목을 가진 첫 번째 등록 종목 (squat 은 powerlifting)"""
        for sport, plugin in self._plugins.items():
            if plugin.supports(discipline):
                return sport
        return None

    # ---------- 등록 ----------

    def register_plugin(self, sport: str, plugin: SportPlugin, replace: bool = False) -> None:
        """
        사용자 정의 플러그인 등록

        Raises:
            PluginAlreadyRegisteredError: 이미 등록된 종목이고 replace=False
            TypeError: SportPlugin 이 아닌 객체
        """
        if not isinstance(plugin, SportPlugin):
            raise TypeError(f"Expected a SportPlugin instance, got {type(plugin).__name__}")
        if sport in self._plugins and not replace:
            raise PluginAlreadyRegisteredError(sport)

        action = "Replaced" if sport in self._plugins else "Registered"
        self._plugins[sport] = plugin
        logger.info(f"{action} plugin for {sport}: {plugin!r}")

    # ---------- 메타데이터 ----------

    def get_plugin_metadata(self, sport: str) -> Dict[str, Any]:
        plugin = self.get_plugin(sport)
        return {
            "sport_name": plugin.sport_name,
            "display_name": plugin.display_name,
            "version": plugin.version,
            "supported_disciplines": plugin.supported_disciplines,
            "max_attempts": plugin.max_attempts,
            "timer": plugin.get_timer_settings().model_dump(),
        }

    def get_all_plugins_metadata(self) -> Dict[str, Dict[str, Any]]:
        return {sport: self.get_plugin_metadata(sport) for sport in self._plugins}


# 싱글톤 레지스트리
_registry: Optional[SportPluginRegistry] = None


def get_registry() -> SportPluginRegistry:
    """프로세스 전역 레지스트리 (싱글톤)"""
    global _registry
    if _registry is None:
        _registry = SportPluginRegistry()
    return _registry


def get_plugin_for_sport(sport: str) -> SportPlugin:
    return get_registry().get_plugin(sport)


def validate_sport_and_discipline(sport: str, discipline: str) -> bool:
    return get_registry().validate_sport_discipline(sport, discipline)


def get_sport_from_discipline(discipline: str) -> Optional[str]:
    return get_registry().get_sport_from_discipline(discipline)
