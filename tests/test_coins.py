"""Tests for the key-value store and the coin bank."""

from capytimer.database.db import (
    delete_value,
    load_number,
    load_string,
    save_number,
    save_string,
)
from capytimer.gamification.coins import (
    CoinBank,
    COINS_STORAGE_KEY,
    FOCUS_TIME_STORAGE_KEY,
)
from capytimer.timer.engine import TimerEngine
from capytimer.timer.session import TimerConfiguration

from helpers import SignalCollector, run_ticks


# ═══════════════════════════════════════════════════════════════════════════
#  KEY-VALUE STORE
# ═══════════════════════════════════════════════════════════════════════════


class TestKeyValueStore:

    def test_missing_number_uses_default(self):
        assert load_number("nope") == 0
        assert load_number("nope", default=7) == 7

    def test_number_round_trip(self):
        save_number("answer", 42)
        assert load_number("answer") == 42

    def test_overwrite_number(self):
        save_number("answer", 1)
        save_number("answer", 2)
        assert load_number("answer") == 2

    def test_string_round_trip(self):
        save_string("@capy_selected", "classic")
        assert load_string("@capy_selected") == "classic"

    def test_missing_string_uses_default(self):
        assert load_string("nope") is None
        assert load_string("nope", default="x") == "x"

    def test_string_replaces_number(self):
        save_number("k", 5)
        save_string("k", "five")
        assert load_number("k", default=-1) == -1
        assert load_string("k") == "five"

    def test_delete(self):
        save_number("k", 5)
        assert delete_value("k") is True
        assert delete_value("k") is False
        assert load_number("k") == 0


# ═══════════════════════════════════════════════════════════════════════════
#  COIN BANK
# ═══════════════════════════════════════════════════════════════════════════


def _engine_for(qapp, focus=60, loops=1):
    cfg = TimerConfiguration(focus_duration=focus, break_duration=0, loop_count=loops)
    return TimerEngine(cfg)


class TestCoinBank:

    def test_starts_empty(self, qapp):
        bank = CoinBank()
        assert bank.total_coins == 0
        assert bank.total_focus_seconds == 0

    def test_deposit_completed_session(self, qapp):
        bank = CoinBank()
        with _engine_for(qapp) as engine:
            engine.start()
            state = run_ticks(engine, 60)

        data = bank.deposit_session(state)
        assert data == {
            "amount": 2,
            "focus_seconds": 60,
            "total_coins": 2,
            "total_focus_seconds": 60,
        }
        assert load_number(COINS_STORAGE_KEY) == 2
        assert load_number(FOCUS_TIME_STORAGE_KEY) == 60

    def test_unfinished_session_not_deposited(self, qapp):
        bank = CoinBank()
        with _engine_for(qapp, focus=120) as engine:
            engine.start()
            state = run_ticks(engine, 60)

        assert bank.deposit_session(state)["amount"] == 0
        assert bank.total_coins == 0

    def test_same_session_deposited_once(self, qapp):
        bank = CoinBank()
        with _engine_for(qapp) as engine:
            engine.start()
            state = run_ticks(engine, 60)

        bank.deposit_session(state)
        again = bank.deposit_session(state)
        assert again["amount"] == 0
        assert bank.total_coins == 2

    def test_totals_accumulate_across_sessions(self, qapp):
        bank = CoinBank()
        with _engine_for(qapp, loops=2) as engine:
            bank.attach(engine)
            engine.start()
            run_ticks(engine, 120)
            engine.reset()
            engine.start()
            run_ticks(engine, 120)

        assert bank.total_coins == 8
        assert bank.total_focus_seconds == 240

    def test_attach_deposits_on_completion(self, qapp):
        bank = CoinBank()
        c = SignalCollector()
        bank.coins_deposited.connect(c)

        with _engine_for(qapp, focus=150) as engine:
            bank.attach(engine)
            engine.start()
            run_ticks(engine, 149)
            assert len(c) == 0
            engine.tick()

        assert len(c) == 1
        assert c.last["amount"] == 5
        assert bank.total_coins == 5

    def test_skipped_session_banks_focus_time_only(self, qapp):
        bank = CoinBank()
        with _engine_for(qapp) as engine:
            bank.attach(engine)
            engine.start()
            run_ticks(engine, 45)
            engine.skip_phase()

        assert bank.total_coins == 0
        assert bank.total_focus_seconds == 45

    def test_clear(self, qapp):
        save_number(COINS_STORAGE_KEY, 99)
        save_number(FOCUS_TIME_STORAGE_KEY, 999)
        bank = CoinBank()
        bank.clear()
        assert bank.total_coins == 0
        assert bank.total_focus_seconds == 0
