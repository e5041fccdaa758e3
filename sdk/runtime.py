from __future__ import annotations
import asyncio
import logging
import shlex
import subprocess
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from core.errors import EndCommandFailed, NotifierError
from core.events import CheckpointEvent, TimerSession
from core.locking import InstanceLock, LockHandle
from core.timing.checkpoints import plan
from core.timing.clock import Clock
from core.timing.coordinator import WaitCoordinator
from core.timing.reference import parse_duration
from .config import AppConfig, get_config

logger = logging.getLogger(__name__)


def new_session(
    mode: str,
    reference: str,
    *,
    title: Optional[str] = None,
    identifier: Optional[str] = None,
    command: Optional[str] = None,
    now: Optional[datetime] = None,
    config: Optional[AppConfig] = None,
) -> TimerSession:
    """Resolve ``reference`` and plan its checkpoints into a session."""
    config = config or get_config()
    total = parse_duration(mode, reference, now or datetime.now())
    return TimerSession(
        title=title or config.default_title,
        total=total,
        checkpoints=plan(total, config.checkpoint_thresholds),
        identifier=identifier,
        command=command,
    )


class TimerRunner:
    """Drive one session: register, wait out checkpoints, unregister, end command."""

    def __init__(
        self,
        session: TimerSession,
        notifier,
        *,
        runtime_dir: Path,
        clock: Optional[Clock] = None,
        beeper=None,
    ):
        self.session = session
        self.notifier = notifier
        self.runtime_dir = Path(runtime_dir)
        self.clock = clock
        self.beeper = beeper
        self.events: List[CheckpointEvent] = []

    # ------------------------------------------------------------------
    # Checkpoint sink
    # ------------------------------------------------------------------
    async def _on_checkpoint(self, checkpoint: timedelta) -> None:
        # sinks may block on subprocesses, so they run in worker threads
        body = self.session.describe(checkpoint)
        event = CheckpointEvent(
            session=self.session.id,
            checkpoint=checkpoint,
            body=body,
            final=checkpoint <= timedelta(0),
        )
        self.events.append(event)
        if self.beeper is not None:
            try:
                await asyncio.to_thread(self.beeper.beep)
            except (OSError, subprocess.SubprocessError) as exc:
                logger.warning("beep failed: %s", exc)
        try:
            await asyncio.to_thread(self.notifier.notify, self.session.title, body)
        except NotifierError as exc:
            logger.warning("notification '%s' not delivered: %s", body, exc)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def register(self) -> Optional[LockHandle]:
        if self.session.identifier is None:
            return None
        return InstanceLock.acquire(self.session.identifier, self.runtime_dir)

    async def wait(self) -> List[CheckpointEvent]:
        coordinator = WaitCoordinator(self.clock)
        await coordinator.run(self.session.total, self.session.checkpoints, self._on_checkpoint)
        return self.events

    def run_end_command(self) -> None:
        command = self.session.command
        if not command:
            return
        args = shlex.split(command, posix=not sys.platform.startswith("win"))
        logger.info("running end command: %s", args)
        try:
            proc = subprocess.run(args)
        except OSError as exc:
            raise EndCommandFailed(command, None, str(exc)) from exc
        if proc.returncode != 0:
            raise EndCommandFailed(command, proc.returncode)

    def run(self) -> List[CheckpointEvent]:
        """Blocking entry point; the lock is released even if waiting fails."""
        handle = self.register()
        try:
            asyncio.run(self.wait())
        finally:
            if handle is not None:
                InstanceLock.release(handle)
        self.run_end_command()
        return self.events
