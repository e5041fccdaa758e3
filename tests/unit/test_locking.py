"""Tests for core.locking: cross-process registration locks."""
from __future__ import annotations

import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from core.errors import AlreadyRegistered, LockIOError, TimerError
from core.locking import InstanceLock, LockHandle


def test_acquire_creates_runtime_dir_and_lock_file(tmp_path: Path) -> None:
    runtime = tmp_path / "nested" / "run"
    handle = InstanceLock.acquire("tea", runtime)
    try:
        assert handle.held
        assert handle.path == runtime / "tea.lock"
        assert handle.path.is_file()
    finally:
        InstanceLock.release(handle)


def test_second_acquire_fails_while_held(tmp_path: Path) -> None:
    first = InstanceLock.acquire("tea", tmp_path)
    try:
        with pytest.raises(AlreadyRegistered) as info:
            InstanceLock.acquire("tea", tmp_path)
        assert info.value.identifier == "tea"
        assert isinstance(info.value, TimerError)
    finally:
        InstanceLock.release(first)


def test_acquire_succeeds_after_release(tmp_path: Path) -> None:
    first = InstanceLock.acquire("tea", tmp_path)
    InstanceLock.release(first)

    second = InstanceLock.acquire("tea", tmp_path)
    InstanceLock.release(second)


def test_release_keeps_file_on_disk(tmp_path: Path) -> None:
    handle = InstanceLock.acquire("tea", tmp_path)
    InstanceLock.release(handle)
    assert (tmp_path / "tea.lock").exists()
    assert not handle.held


def test_different_identifiers_do_not_conflict(tmp_path: Path) -> None:
    a = InstanceLock.acquire("a", tmp_path)
    b = InstanceLock.acquire("b", tmp_path)
    InstanceLock.release(a)
    InstanceLock.release(b)


def test_double_release_is_an_error(tmp_path: Path) -> None:
    handle = InstanceLock.acquire("tea", tmp_path)
    handle.release()
    with pytest.raises(LockIOError):
        handle.release()


def test_context_manager_releases(tmp_path: Path) -> None:
    with InstanceLock.acquire("tea", tmp_path) as handle:
        assert isinstance(handle, LockHandle)
        with pytest.raises(AlreadyRegistered):
            InstanceLock.acquire("tea", tmp_path)
    assert not handle.held
    InstanceLock.release(InstanceLock.acquire("tea", tmp_path))


def test_runtime_dir_that_is_a_file_is_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(LockIOError) as info:
        InstanceLock.acquire("tea", blocker / "run")
    assert isinstance(info.value.__cause__, OSError)


@pytest.mark.skipif(sys.platform.startswith("win"), reason="flock semantics")
def test_lock_is_exclusive_across_processes(tmp_path: Path) -> None:
    script = textwrap.dedent(
        f"""
        import sys
        from core.errors import AlreadyRegistered
        from core.locking import InstanceLock
        try:
            InstanceLock.acquire("tea", {str(tmp_path)!r})
        except AlreadyRegistered:
            sys.exit(3)
        sys.exit(0)
        """
    )
    root = Path(__file__).resolve().parents[2]
    with InstanceLock.acquire("tea", tmp_path):
        proc = subprocess.run([sys.executable, "-c", script], cwd=root)
        assert proc.returncode == 3

    proc = subprocess.run([sys.executable, "-c", script], cwd=root)
    assert proc.returncode == 0
