from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, NoReturn, Optional

import typer

from config.paths import validate_identifier
from core.errors import TimerError
from core.timing.clock import DryRunClock
from core.timing.duration import format_duration
from sdk.config import load_config
from sdk.registry import REGISTRY
from sdk.runtime import TimerRunner, new_session


app = typer.Typer(add_completion=False, no_args_is_help=True)


@dataclass
class _Options:
    title: Optional[str]
    register: Optional[str]
    command: Optional[str]
    notifier: Optional[str]
    beep: bool
    dry_run: bool


def _fail(message: object) -> NoReturn:
    typer.echo(f"[countdown] {message}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Title shown in notifications"),
    register: Optional[str] = typer.Option(
        None,
        "--register",
        "-r",
        help="Refuse to start if a timer with this identifier is already running",
    ),
    command: Optional[str] = typer.Option(
        None, "--exec", "-e", help="Command to run once the timer is over, e.g. 'mpv ding.ogg'"
    ),
    notifier: Optional[str] = typer.Option(
        None, "--notifier", help="Notification sink: 'console' or 'desktop'"
    ),
    beep: bool = typer.Option(False, "--beep/--no-beep", help="Beep at every checkpoint"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report the sleeps instead of waiting"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Countdown timer with staged notifications before it ends."""

    logging.basicConfig(
        level=logging.DEBUG if verbose or dry_run else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    if register is not None:
        try:
            validate_identifier(register)
        except ValueError as exc:
            _fail(exc)
    ctx.obj = _Options(title, register, command, notifier, beep, dry_run)


def _start(opts: _Options, mode: str, reference: str) -> None:
    try:
        config = load_config(notifier=opts.notifier, beep=opts.beep)
    except ValueError as exc:
        _fail(f"invalid configuration: {exc}")

    now = datetime.now()
    try:
        session = new_session(
            mode,
            reference,
            title=opts.title,
            identifier=opts.register,
            command=opts.command,
            now=now,
            config=config,
        )
    except TimerError as exc:
        _fail(exc)

    try:
        notifier = REGISTRY.create(config.notifier)
    except LookupError as exc:
        _fail(exc)
    beeper = REGISTRY.create("beep") if config.beep else None

    eta = now + session.total
    typer.echo(
        f"[countdown] Timer will go off in {format_duration(session.total) or '0s'} "
        f"(at {eta:%Y-%m-%d %H:%M:%S})"
    )

    runner = TimerRunner(
        session,
        notifier,
        runtime_dir=config.runtime_dir,
        clock=DryRunClock() if opts.dry_run else None,
        beeper=beeper,
    )
    try:
        runner.run()
    except TimerError as exc:
        _fail(exc)


@app.command("at")
def at(
    ctx: typer.Context,
    reference: str = typer.Argument(..., help="Target time: HH, HH:MM or HH:MM:SS"),
) -> None:
    """Go off at a local wall-clock time (tomorrow if it already passed)."""
    _start(ctx.obj, "at", reference)


@app.command("in")
def in_(
    ctx: typer.Context,
    reference: List[str] = typer.Argument(..., help="Offset such as '1h 30m' or '45s'"),
) -> None:
    """Go off after a relative duration."""
    _start(ctx.obj, "in", " ".join(reference))


if __name__ == "__main__":
    app()
