from __future__ import annotations
from importlib import import_module
class Registry:
    """Map short plugin names to ``"module:Class"`` targets and build them."""
    def __init__(self):
        self._map: dict[str, str] = {}
    def register(self, key: str, target: str) -> None:
        self._map[key] = target
    def keys(self) -> list[str]:
        return sorted(self._map)
    def target(self, key: str) -> str:
        return self._map.get(key, key)
    def create(self, key: str, *args, **kwargs):
        target = self.target(key)
        mod_path, _, obj = target.partition(":")
        try:
            mod = import_module(mod_path)
        except ModuleNotFoundError as exc:
            raise LookupError(f"unknown plugin '{key}' (known: {', '.join(self.keys())})") from exc
        cls = getattr(mod, obj) if obj else mod
        return cls(*args, **kwargs)
REGISTRY = Registry()
REGISTRY.register("console", "plugins.notifiers.console.impl:ConsoleNotifier")
REGISTRY.register("desktop", "plugins.notifiers.desktop.impl:DesktopNotifier")
REGISTRY.register("beep", "plugins.notifiers.beep.impl:Beeper")
