"""Session state and phase transitions for CapyTimer.

Phases
------
PREPARATION   Optional 5-minute warm-up before the first focus block.
FOCUS         Work time; the only phase that earns coins.
BREAK         Rest between focus blocks (skipped when the break length is 0).
COMPLETED     Terminal phase, reached after the last loop.

Run states
----------
IDLE → RUNNING             (start)
RUNNING → PAUSED           (pause)
PAUSED → RUNNING           (start)
{any} → IDLE               (reset)
RUNNING → COMPLETED        (last phase ends)

Every function in this module is pure: it takes a configuration and a
``SessionState`` and returns a new ``SessionState``.  ``TimerEngine`` owns
the current value and swaps it in one assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .rewards import FocusReward, focus_reward


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    PREPARATION = "preparation"
    FOCUS = "focus"
    BREAK = "break"
    COMPLETED = "completed"


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

PREPARATION_DURATION = 5 * 60
MIN_FOCUS_DURATION = 30
MIN_LOOPS = 1
MAX_LOOPS = 9


# ── configuration ─────────────────────────────────────────────────────────


class ConfigurationError(ValueError):
    """Raised when a ``TimerConfiguration`` is out of range."""


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class TimerConfiguration:
    """Per-session timer settings.  Validated on construction."""

    focus_duration: int
    break_duration: int = 0
    loop_count: int = 1
    has_preparation_phase: bool = False
    count_up: bool = False

    def __post_init__(self) -> None:
        focus = _require_int("focus_duration", self.focus_duration)
        brk = _require_int("break_duration", self.break_duration)
        loops = _require_int("loop_count", self.loop_count)

        if focus < MIN_FOCUS_DURATION:
            raise ConfigurationError(
                f"focus_duration must be at least {MIN_FOCUS_DURATION}s, "
                f"got {focus}"
            )
        if brk < 0:
            raise ConfigurationError(
                f"break_duration must not be negative, got {brk}"
            )
        if not MIN_LOOPS <= loops <= MAX_LOOPS:
            raise ConfigurationError(
                f"loop_count must be between {MIN_LOOPS} and {MAX_LOOPS}, "
                f"got {loops}"
            )


# ── session state ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of a session."""

    phase: Phase
    run_state: RunState
    current_loop: int
    loop_count: int
    time_elapsed: int
    time_remaining: int
    total_time_for_phase: int
    coins_earned: int = 0
    completed_focus_time: int = 0

    @property
    def is_running(self) -> bool:
        return self.run_state == RunState.RUNNING

    @property
    def is_completed(self) -> bool:
        return self.phase == Phase.COMPLETED


def phase_duration(config: TimerConfiguration, phase: Phase) -> int:
    """Configured length of *phase* in seconds."""
    if phase == Phase.PREPARATION:
        return PREPARATION_DURATION
    if phase == Phase.FOCUS:
        return config.focus_duration
    if phase == Phase.BREAK:
        return config.break_duration
    return 0


def initial_state(config: TimerConfiguration) -> SessionState:
    """A fresh IDLE session, positioned at the first phase."""
    first = Phase.PREPARATION if config.has_preparation_phase else Phase.FOCUS
    duration = phase_duration(config, first)
    return SessionState(
        phase=first,
        run_state=RunState.IDLE,
        current_loop=1,
        loop_count=config.loop_count,
        time_elapsed=0,
        time_remaining=duration,
        total_time_for_phase=duration,
    )


# ── transitions ───────────────────────────────────────────────────────────


def next_phase(
    config: TimerConfiguration, phase: Phase, current_loop: int
) -> tuple[Phase, int]:
    """Return ``(phase, loop)`` that follows *phase* in loop *current_loop*."""
    if phase == Phase.PREPARATION:
        return Phase.FOCUS, current_loop

    if phase == Phase.FOCUS:
        if config.break_duration > 0:
            return Phase.BREAK, current_loop
        if current_loop < config.loop_count:
            return Phase.FOCUS, current_loop + 1
        return Phase.COMPLETED, current_loop

    if phase == Phase.BREAK:
        if current_loop < config.loop_count:
            return Phase.FOCUS, current_loop + 1
        return Phase.COMPLETED, current_loop

    return Phase.COMPLETED, current_loop


def exit_reward(state: SessionState, skipped: bool) -> FocusReward | None:
    """Reward for leaving the current phase, or ``None`` outside Focus."""
    if state.phase != Phase.FOCUS:
        return None
    return focus_reward(
        state.time_elapsed, skipped=skipped, loop=state.current_loop,
    )


def apply_transition(
    config: TimerConfiguration, state: SessionState, skipped: bool
) -> SessionState:
    """End the current phase and enter the next one."""
    if state.phase == Phase.COMPLETED:
        return state

    coins = state.coins_earned
    focus_time = state.completed_focus_time
    reward = exit_reward(state, skipped)
    if reward is not None:
        coins += reward.coins
        focus_time += reward.focus_seconds

    phase, loop = next_phase(config, state.phase, state.current_loop)
    duration = phase_duration(config, phase)
    run_state = RunState.COMPLETED if phase == Phase.COMPLETED else state.run_state

    return replace(
        state,
        phase=phase,
        run_state=run_state,
        current_loop=loop,
        time_elapsed=0,
        time_remaining=duration,
        total_time_for_phase=duration,
        coins_earned=coins,
        completed_focus_time=focus_time,
    )


def apply_tick(config: TimerConfiguration, state: SessionState) -> SessionState:
    """Advance one second; finishes the phase when time runs out."""
    if not state.is_running or state.is_completed:
        return state

    ticked = replace(
        state,
        time_elapsed=state.time_elapsed + 1,
        time_remaining=state.time_remaining - 1,
    )
    if ticked.time_remaining <= 0:
        return apply_transition(config, ticked, skipped=False)
    return ticked


def apply_start(state: SessionState) -> SessionState:
    if state.run_state in (RunState.RUNNING, RunState.COMPLETED):
        return state
    return replace(state, run_state=RunState.RUNNING)


def apply_pause(state: SessionState) -> SessionState:
    if not state.is_running:
        return state
    return replace(state, run_state=RunState.PAUSED)


def apply_skip(config: TimerConfiguration, state: SessionState) -> SessionState:
    """Cut the current phase short.  Ignored unless the timer is running."""
    if not state.is_running:
        return state
    return apply_transition(config, state, skipped=True)


# ── derived values ────────────────────────────────────────────────────────


def display_time(config: TimerConfiguration, state: SessionState) -> int:
    """Seconds to show: elapsed when counting up, remaining otherwise."""
    return state.time_elapsed if config.count_up else state.time_remaining


def format_time(seconds: int) -> str:
    """Render *seconds* as ``MM:SS``.  Minutes are not wrapped at 60."""
    if seconds < 0:
        raise ValueError(f"cannot format negative time: {seconds}")
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def total_configured_duration(config: TimerConfiguration) -> int:
    """Length of a full session, preparation included."""
    prep = PREPARATION_DURATION if config.has_preparation_phase else 0
    return prep + (config.focus_duration + config.break_duration) * config.loop_count


def progress_ratio(state: SessionState) -> float:
    """0.0 → 1.0 progress through the *current phase* only."""
    if state.total_time_for_phase <= 0:
        return 0.0
    return max(0.0, min(1.0, state.time_elapsed / state.total_time_for_phase))
