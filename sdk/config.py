from __future__ import annotations
from datetime import timedelta
from pathlib import Path
from typing import Optional, Tuple
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.paths import get_paths

DEFAULT_THRESHOLD_SECONDS: Tuple[int, ...] = (600, 300, 60, 10)


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # raw COUNTDOWN_THRESHOLDS text is parsed and checked by the validators below
    thresholds: Tuple[int, ...] = Field(
        default_factory=lambda: os.getenv("COUNTDOWN_THRESHOLDS") or DEFAULT_THRESHOLD_SECONDS,
        validate_default=True,
    )
    default_title: str = "Unnamed timer"
    notifier: str = Field(default_factory=lambda: os.getenv("COUNTDOWN_NOTIFIER", "console"))
    beep: bool = False
    runtime_dir: Path = Field(default_factory=lambda: get_paths().runtime_root)

    @field_validator("thresholds", mode="before")
    @classmethod
    def _split_env_list(cls, value):
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("thresholds")
    @classmethod
    def _descending_positive(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        if any(v <= 0 for v in value):
            raise ValueError("checkpoint thresholds must be positive seconds")
        if any(a <= b for a, b in zip(value, value[1:])):
            raise ValueError("checkpoint thresholds must be strictly descending")
        return value

    @property
    def checkpoint_thresholds(self) -> Tuple[timedelta, ...]:
        return tuple(timedelta(seconds=v) for v in self.thresholds)


def load_config(**overrides) -> AppConfig:
    """Build a config from the environment, ignoring ``None`` overrides."""
    return AppConfig(**{k: v for k, v in overrides.items() if v is not None})


_config_singleton: Optional[AppConfig] = None

def get_config(force_refresh: bool = False) -> AppConfig:
    """
    Return a cached environment-derived AppConfig. Built on first use so a bad
    COUNTDOWN_* value surfaces as a ValidationError at the call site, not at import.
    """
    global _config_singleton
    if force_refresh or _config_singleton is None:
        _config_singleton = AppConfig()
    return _config_singleton
