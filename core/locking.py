"""Cross-process registration lock.

A registered timer holds an exclusive, advisory, non-blocking lock on
``<runtime_dir>/<identifier>.lock`` for as long as its checkpoints are
pending. A second timer asking for the same identifier fails immediately
with :class:`~core.errors.AlreadyRegistered`. The lock file is never deleted,
only unlocked, so a chained timer can pick the identifier up right after.
"""

from __future__ import annotations

import errno
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Optional

from core.errors import AlreadyRegistered, LockIOError

if sys.platform.startswith("win"):
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)

_CONTENDED = {errno.EAGAIN, errno.EACCES, errno.EWOULDBLOCK}


def _try_lock(fh: IO[str]) -> None:
    if sys.platform.startswith("win"):
        fh.seek(0)
        msvcrt.locking(fh.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock(fh: IO[str]) -> None:
    if sys.platform.startswith("win"):
        fh.seek(0)
        msvcrt.locking(fh.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(fh.fileno(), fcntl.LOCK_UN)


def lock_path(identifier: str, runtime_dir: Path) -> Path:
    return Path(runtime_dir) / f"{identifier}.lock"


@dataclass
class LockHandle:
    """An acquired registration lock; release it exactly once."""

    identifier: str
    path: Path
    _fh: Optional[IO[str]] = field(default=None, repr=False)

    @property
    def held(self) -> bool:
        return self._fh is not None

    def release(self) -> None:
        InstanceLock.release(self)

    def __enter__(self) -> "LockHandle":
        return self

    def __exit__(self, *_exc: object) -> None:
        if self.held:
            self.release()


class InstanceLock:
    """Acquire and release registration locks."""

    @staticmethod
    def acquire(identifier: str, runtime_dir: Path) -> LockHandle:
        runtime_dir = Path(runtime_dir)
        try:
            runtime_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LockIOError(f"cannot create runtime directory {runtime_dir}: {exc}") from exc

        path = lock_path(identifier, runtime_dir)
        try:
            fh = path.open("w+", encoding="utf-8")
        except OSError as exc:
            raise LockIOError(f"cannot open lock file {path}: {exc}") from exc

        try:
            _try_lock(fh)
        except OSError as exc:
            fh.close()
            if exc.errno in _CONTENDED:
                raise AlreadyRegistered(identifier) from exc
            raise LockIOError(f"cannot lock {path}: {exc}") from exc

        logger.debug("registered '%s' via %s", identifier, path)
        return LockHandle(identifier=identifier, path=path, _fh=fh)

    @staticmethod
    def release(handle: LockHandle) -> None:
        fh = handle._fh
        if fh is None:
            raise LockIOError(f"lock '{handle.identifier}' was already released")
        handle._fh = None
        try:
            _unlock(fh)
        except OSError as exc:
            raise LockIOError(f"cannot unlock {handle.path}: {exc}") from exc
        finally:
            fh.close()
        logger.debug("released '%s'", handle.identifier)


__all__ = ["InstanceLock", "LockHandle", "lock_path"]
