# config/paths.py
"""
Centralized, cross-platform runtime locations for countdown.

Design goals
- Single source of truth for where registration lock files live
- Honors COUNTDOWN_RUNTIME_DIR, then XDG_RUNTIME_DIR
- Sensible OS defaults when env vars are not provided
- Identifier validation so a registration name can never escape the runtime dir
"""

from __future__ import annotations

import errno
import getpass
import os
import re
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# ---------- OS defaults (used only if env vars not set) ----------

def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # no passwd entry / no login name, e.g. inside minimal containers
        return str(os.getuid()) if hasattr(os, "getuid") else "user"


def _platform_default_runtime() -> Path:
    """
    Returns an OS-specific directory for per-user runtime files:
    - Linux:   $XDG_RUNTIME_DIR/countdown
    - Windows: %LOCALAPPDATA%/Countdown/run
    - other:   <tempdir>/countdown-<user>
    """
    xdg = os.getenv("XDG_RUNTIME_DIR")
    if xdg:
        return Path(xdg) / "countdown"
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA")
        if base:
            return Path(base) / "Countdown" / "run"
    return Path(tempfile.gettempdir()) / f"countdown-{_current_user()}"


# ---------- Environment overrides ----------

def _env_or_default_runtime_root() -> Path:
    override = os.getenv("COUNTDOWN_RUNTIME_DIR")
    return Path(override) if override else _platform_default_runtime()


# ---------- Identifier validation ----------

_IDENTIFIER = re.compile(r"[A-Za-z0-9._-]+")


def validate_identifier(identifier: str) -> str:
    """
    Return ``identifier`` unchanged if it is safe to use as a lock file name.

    Raises ValueError for empty names, dot-only names and anything outside
    ``[A-Za-z0-9._-]`` (path separators, NUL, whitespace...).
    """
    if not identifier:
        raise ValueError("registration identifier must not be empty")
    if not _IDENTIFIER.fullmatch(identifier) or set(identifier) == {"."}:
        raise ValueError(
            f"invalid registration identifier {identifier!r}: use letters, digits, '.', '_' or '-'"
        )
    return identifier


# ---------- Core dataclass ----------

@dataclass(frozen=True)
class Paths:
    """
    Canonical runtime path container.

    Most callers should obtain a singleton instance via get_paths().
    """
    runtime_root: Path

    # ----- factories -----

    @staticmethod
    def from_env() -> "Paths":
        return Paths(_env_or_default_runtime_root())

    # ----- helpers -----

    def lock_file(self, identifier: str) -> Path:
        """Lock file backing the registration ``identifier``."""
        return self.runtime_root / f"{validate_identifier(identifier)}.lock"

    # ----- setup / validation -----

    def ensure_all(self) -> None:
        self.runtime_root.mkdir(parents=True, exist_ok=True)

    def verify_writeable(self) -> None:
        """
        Raise OSError if the runtime root is not writeable.
        """
        try:
            self.ensure_all()
            test = self.runtime_root / ".write_test"
            test.write_text("ok", encoding="utf-8")
            test.unlink(missing_ok=True)
        except OSError as e:
            raise OSError(errno.EACCES, f"Not writeable: {self.runtime_root}", e) from e


# ---------- Singleton access ----------

_paths_singleton: Optional[Paths] = None

def get_paths(force_refresh: bool = False) -> Paths:
    """
    Return a cached Paths instance. Directories are created lazily by the
    lock itself, so discovery has no filesystem side effects.
    """
    global _paths_singleton
    if force_refresh or _paths_singleton is None:
        _paths_singleton = Paths.from_env()
    return _paths_singleton


# ---------- CLI sanity check ----------

if __name__ == "__main__":
    p = get_paths(force_refresh=True)
    try:
        p.verify_writeable()
    except OSError as e:
        print(f"[WARN] Writeability check failed: {e}")

    print("Runtime root:       ", p.runtime_root)
    print("Example lock file:  ", p.lock_file("example"))
