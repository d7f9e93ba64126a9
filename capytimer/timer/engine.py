"""Qt-driven timer engine for CapyTimer.

``TimerEngine`` owns one ``SessionState`` and replaces it wholesale on
every command or tick, using the pure reducers in :mod:`.session`.  A
1-second ``QTimer`` calls :meth:`TimerEngine.tick` while the run state is
RUNNING and is stopped on every other run state.

Tick and command handling is serialized behind a lock; signals are
emitted only after the new state has been stored, so a slot reacting to a
transition always sees the state that produced it.
"""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .rewards import FocusReward
from .session import (
    Phase,
    RunState,
    SessionState,
    TimerConfiguration,
    apply_pause,
    apply_skip,
    apply_start,
    apply_tick,
    display_time,
    format_time,
    initial_state,
    progress_ratio,
    total_configured_duration,
)

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class TimerEngine(QObject):
    """Focus/break session timer.

    Signals
    -------
    ticked(state: SessionState)
        Emitted after every tick that advanced the clock.
    state_changed(run_state: RunState)
        Emitted when the run state changes.
    phase_changed(state: SessionState)
        Emitted when a new phase (or loop) begins.
    focus_ended(reward: FocusReward)
        Emitted whenever a Focus phase ends, naturally or skipped.
    session_completed(state: SessionState)
        Emitted once when the session reaches COMPLETED.
    """

    ticked = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    focus_ended = pyqtSignal(object)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        configuration: TimerConfiguration,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        self._config = configuration
        self._state: SessionState = initial_state(configuration)
        self._lock = threading.RLock()
        self._closed = False
        self._generation = 0  # bumped by every reset

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self.tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def configuration(self) -> TimerConfiguration:
        return self._config

    @property
    def snapshot(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def run_state(self) -> RunState:
        return self._state.run_state

    @property
    def progress_ratio(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        return progress_ratio(self._state)

    @property
    def is_driver_active(self) -> bool:
        """True while the 1-second QTimer is scheduled."""
        return self._qt_timer.isActive()

    def display_time(self) -> int:
        return display_time(self._config, self._state)

    def formatted_display_time(self) -> str:
        return format_time(self.display_time())

    def total_configured_duration(self) -> int:
        return total_configured_duration(self._config)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> SessionState:
        """Start or resume.  No-op when running or completed."""
        return self._apply(apply_start, "start")

    def pause(self) -> SessionState:
        """Freeze the clock.  No-op unless running."""
        return self._apply(apply_pause, "pause")

    def reset(self) -> SessionState:
        """Throw the session away and start over from IDLE."""
        return self._apply(lambda _: initial_state(self._config), "reset")

    def skip_phase(self) -> SessionState:
        """End the current phase early.  A skipped Focus earns no coins."""
        return self._apply(
            lambda s: apply_skip(self._config, s), "skip", skipped=True,
        )

    def tick(self) -> SessionState:
        """Advance the clock by one second."""
        return self._apply(lambda s: apply_tick(self._config, s), "tick")

    def configure(self, configuration: TimerConfiguration) -> bool:
        """Swap in a new configuration.  Only allowed while IDLE.

        Returns ``True`` when accepted; the session is reset to the new
        configuration's first phase.
        """
        with self._lock:
            if self._state.run_state != RunState.IDLE:
                logger.warning(
                    "Configuration change rejected while %s",
                    self._state.run_state.value,
                )
                return False
            self._config = configuration
        self.reset()
        return True

    def close(self) -> None:
        """Stop the periodic driver.  Safe to call more than once."""
        with self._lock:
            self._qt_timer.stop()
            self._closed = True

    def __enter__(self) -> "TimerEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _apply(self, reducer, command: str, *, skipped: bool = False) -> SessionState:
        with self._lock:
            old = self._state
            if command == "reset":
                self._generation += 1
            generation = self._generation
            new = reducer(old)
            self._state = new
            self._sync_driver(new.run_state)

        if new is old:
            if command != "tick":
                logger.debug(
                    "%s ignored (phase=%s, run_state=%s)",
                    command, old.phase.value, old.run_state.value,
                )
            return new

        self._emit_changes(old, new, command, skipped, generation)
        return new

    def _sync_driver(self, run_state: RunState) -> None:
        if run_state == RunState.RUNNING and not self._closed:
            if not self._qt_timer.isActive():
                self._qt_timer.start()
        elif self._qt_timer.isActive():
            self._qt_timer.stop()

    def _emit_changes(
        self,
        old: SessionState,
        new: SessionState,
        command: str,
        skipped: bool,
        generation: int,
    ) -> None:
        phase_moved = (
            new.phase != old.phase or new.current_loop != old.current_loop
        )
        transitioned = command in ("tick", "skip") and phase_moved
        pending: list[tuple[object, object]] = []

        if command == "tick":
            pending.append((self.ticked, new))

        if transitioned and old.phase == Phase.FOCUS:
            reward = FocusReward(
                coins=new.coins_earned - old.coins_earned,
                focus_seconds=new.completed_focus_time - old.completed_focus_time,
                skipped=skipped,
                loop=old.current_loop,
            )
            if skipped:
                logger.info(
                    "Focus skipped: %ds counted, 0 coins awarded",
                    reward.focus_seconds,
                )
            else:
                logger.info(
                    "Focus completed: %ds = %d coins",
                    reward.focus_seconds, reward.coins,
                )
            pending.append((self.focus_ended, reward))

        if new.run_state != old.run_state:
            pending.append((self.state_changed, new.run_state))

        if transitioned:
            logger.info(
                "%s → %s (loop %d/%d)",
                old.phase.value, new.phase.value,
                new.current_loop, new.loop_count,
            )
        if phase_moved:
            pending.append((self.phase_changed, new))

        if new.run_state == RunState.COMPLETED and old.run_state != RunState.COMPLETED:
            logger.info(
                "Session complete: %d coins, %ds focus",
                new.coins_earned, new.completed_focus_time,
            )
            pending.append((self.session_completed, new))

        # A slot may have reset the session; stop announcing the
        # superseded one.
        for signal, payload in pending:
            if self._generation != generation:
                break
            signal.emit(payload)
