"""Coin bank: persists what finished sessions earned.

A session's ``coins_earned`` and ``completed_focus_time`` are only read
once it reaches COMPLETED; the bank adds them to running totals in the
key-value store.  Depositing the same completed snapshot twice is a
no-op, so replaying ``session_completed`` can't double-count.

Storage keys
------------
``@capy_timer_total_coins``          lifetime coins
``@capy_timer_total_focus_seconds``  lifetime focus time in seconds
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from ..database.db import delete_value, load_number, save_number
from ..timer.engine import TimerEngine
from ..timer.session import RunState, SessionState

logger = logging.getLogger(__name__)

COINS_STORAGE_KEY = "@capy_timer_total_coins"
FOCUS_TIME_STORAGE_KEY = "@capy_timer_total_focus_seconds"


class CoinBank(QObject):
    """Credits completed sessions to the stored totals.

    Signals
    -------
    coins_deposited(data: dict)
        Emitted after a deposit.  Keys: ``amount``, ``focus_seconds``,
        ``total_coins``, ``total_focus_seconds``.
    """

    coins_deposited = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._last_deposited: SessionState | None = None

    @property
    def total_coins(self) -> int:
        return load_number(COINS_STORAGE_KEY)

    @property
    def total_focus_seconds(self) -> int:
        return load_number(FOCUS_TIME_STORAGE_KEY)

    def attach(self, engine: TimerEngine) -> None:
        """Deposit automatically whenever *engine* completes a session."""
        engine.session_completed.connect(self.deposit_session)

    def deposit_session(self, state: SessionState) -> dict:
        """Add a completed session's coins and focus time to the totals.

        Returns a dict with ``amount``, ``focus_seconds``, ``total_coins``
        and ``total_focus_seconds``.  Unfinished or already-deposited
        sessions return zero amounts and leave the store alone.
        """
        if state.run_state != RunState.COMPLETED or state is self._last_deposited:
            return {
                "amount": 0,
                "focus_seconds": 0,
                "total_coins": self.total_coins,
                "total_focus_seconds": self.total_focus_seconds,
            }

        self._last_deposited = state
        total_coins = self.total_coins + state.coins_earned
        total_focus = self.total_focus_seconds + state.completed_focus_time
        save_number(COINS_STORAGE_KEY, total_coins)
        save_number(FOCUS_TIME_STORAGE_KEY, total_focus)
        logger.info(
            "Saved %d coins. New total: %d", state.coins_earned, total_coins,
        )

        data = {
            "amount": state.coins_earned,
            "focus_seconds": state.completed_focus_time,
            "total_coins": total_coins,
            "total_focus_seconds": total_focus,
        }
        self.coins_deposited.emit(data)
        return data

    def clear(self) -> None:
        """Forget all stored totals."""
        delete_value(COINS_STORAGE_KEY)
        delete_value(FOCUS_TIME_STORAGE_KEY)
        self._last_deposited = None
        logger.info("Cleared stored coins")
