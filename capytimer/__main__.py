"""Console runner for CapyTimer: python -m capytimer."""

from __future__ import annotations

import logging
import re
import signal
import sys
from dataclasses import replace

import typer
from PyQt6.QtCore import QCoreApplication

from .database.db import init_db
from .gamification.coins import CoinBank
from .messages import message_for, should_show_message
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerEngine
from .timer.session import (
    ConfigurationError,
    Phase,
    SessionState,
    TimerConfiguration,
    format_time,
)

app = typer.Typer(
    name="capytimer",
    help="Focus/break session timer that pays out coins for focused time.",
    no_args_is_help=True,
)

PHASE_LABELS = {
    Phase.PREPARATION: "Get Ready",
    Phase.FOCUS: "Focus Time",
    Phase.BREAK: "Break Time",
    Phase.COMPLETED: "Complete!",
}

_DURATION_PART = re.compile(r"(\d+)([hms])")


def parse_duration(text: str) -> int:
    """Parse ``90``, ``90s``, ``25m``, ``1h`` or ``1m30s`` into seconds."""
    value = text.strip().lower()
    if value.isdigit():
        return int(value)
    parts = _DURATION_PART.findall(value)
    if not parts or "".join(n + u for n, u in parts) != value:
        raise typer.BadParameter(f"not a duration: {text!r}")
    scale = {"h": 3600, "m": 60, "s": 1}
    return sum(int(n) * scale[u] for n, u in parts)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def apply_overrides(
    settings: Settings,
    *,
    focus: str | None = None,
    break_: str | None = None,
    loops: int | None = None,
    prep: bool | None = None,
    count_up: bool | None = None,
) -> Settings:
    """Return a copy of *settings* with the given CLI options applied."""
    changes: dict[str, object] = {}
    if focus is not None:
        changes["focus_duration"] = parse_duration(focus)
    if break_ is not None:
        changes["break_duration"] = parse_duration(break_)
    if loops is not None:
        changes["loop_count"] = loops
    if prep is not None:
        changes["has_preparation_phase"] = prep
    if count_up is not None:
        changes["count_up"] = count_up
    return replace(settings, **changes)


def _build_configuration(settings: Settings) -> TimerConfiguration:
    try:
        return settings.to_configuration()
    except ConfigurationError as exc:
        typer.echo(f"Invalid timer configuration: {exc}", err=True)
        raise typer.Exit(2)


def status_line(engine: TimerEngine, state: SessionState) -> str:
    label = PHASE_LABELS[state.phase]
    return (
        f"{label:<10}  loop {state.current_loop}/{state.loop_count}  "
        f"{engine.formatted_display_time()}  coins {state.coins_earned}"
    )


# ── commands ─────────────────────────────────────────────────────────────


@app.command()
def run(
    focus: str | None = typer.Option(None, "--focus", help="Focus length, e.g. 25m"),
    break_: str | None = typer.Option(None, "--break", help="Break length, 0 for none"),
    loops: int | None = typer.Option(None, "--loops", help="Focus/break repetitions (1-9)"),
    prep: bool | None = typer.Option(None, "--prep/--no-prep", help="5-minute warm-up first"),
    count_up: bool | None = typer.Option(None, "--count-up/--count-down"),
    save: bool = typer.Option(True, "--save/--no-save", help="Bank the coins when done"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Run one session in the terminal."""
    _configure_logging(verbose)
    settings = apply_overrides(
        load_settings(),
        focus=focus, break_=break_, loops=loops, prep=prep, count_up=count_up,
    )
    config = _build_configuration(settings)

    qt_app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    bank: CoinBank | None = None
    if save:
        init_db()
        bank = CoinBank()

    ticks_since_message = 0

    with TimerEngine(config) as engine:
        if bank is not None:
            bank.attach(engine)

        def on_tick(state: SessionState) -> None:
            nonlocal ticks_since_message
            ticks_since_message += 1
            typer.echo("\r" + status_line(engine, state), nl=False)
            if settings.show_messages and should_show_message(ticks_since_message * 1000):
                ticks_since_message = 0
                typer.echo(f"\n  \"{message_for(state).text}\"")

        def on_phase(state: SessionState) -> None:
            nonlocal ticks_since_message
            ticks_since_message = 0
            typer.echo("")
            if settings.show_messages:
                typer.echo(f"  \"{message_for(state).text}\"")

        engine.ticked.connect(on_tick)
        engine.phase_changed.connect(on_phase)
        engine.session_completed.connect(lambda _: qt_app.quit())

        # Python handlers run between Qt events, i.e. on the next tick.
        previous_handler = signal.signal(signal.SIGINT, lambda *_: qt_app.quit())
        try:
            typer.echo(status_line(engine, engine.snapshot), nl=False)
            engine.start()
            qt_app.exec()
        finally:
            signal.signal(signal.SIGINT, previous_handler)
        final = engine.snapshot

    typer.echo("")
    if not final.is_completed:
        typer.echo("Session stopped early; nothing was banked.")
        raise typer.Exit(1)

    minutes, seconds = divmod(final.completed_focus_time, 60)
    typer.echo(f"You earned {final.coins_earned} coins!")
    typer.echo(f"Total focus time: {minutes}m {seconds}s")
    if bank is not None:
        typer.echo(f"Coin balance: {bank.total_coins}")


@app.command()
def coins():
    """Show stored coin and focus-time totals."""
    init_db()
    bank = CoinBank()
    typer.echo(f"Coins: {bank.total_coins}")
    typer.echo(f"Focus time: {format_time(bank.total_focus_seconds)}")


@app.command("clear-coins")
def clear_coins(
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
):
    """Delete stored coin and focus-time totals."""
    if not yes:
        typer.confirm("Clear all stored coins?", abort=True)
    init_db()
    CoinBank().clear()
    typer.echo("Coins cleared.")


@app.command()
def configure(
    focus: str | None = typer.Option(None, "--focus"),
    break_: str | None = typer.Option(None, "--break"),
    loops: int | None = typer.Option(None, "--loops"),
    prep: bool | None = typer.Option(None, "--prep/--no-prep"),
    count_up: bool | None = typer.Option(None, "--count-up/--count-down"),
    messages: bool | None = typer.Option(None, "--messages/--no-messages"),
):
    """Save default timer settings."""
    settings = apply_overrides(
        load_settings(),
        focus=focus, break_=break_, loops=loops, prep=prep, count_up=count_up,
    )
    if messages is not None:
        settings.show_messages = messages
    config = _build_configuration(settings)
    save_settings(settings)
    typer.echo(
        f"Saved: focus {format_time(config.focus_duration)}, "
        f"break {format_time(config.break_duration)}, "
        f"{config.loop_count} loops, prep {'on' if config.has_preparation_phase else 'off'}"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
