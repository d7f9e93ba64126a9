"""Coin reward policy.

Coins are earned only for Focus time that ran out naturally:

- Focus ends on its own:   1 coin per full 30 seconds of elapsed time
- Focus skipped:           0 coins (the elapsed time still counts as focus)
- Preparation / Break:     nothing

The elapsed seconds are always the time actually spent in the phase, not
the configured duration.
"""

from __future__ import annotations

from dataclasses import dataclass


COIN_INTERVAL_SECONDS = 30   # one coin per 30 s of completed focus


@dataclass(frozen=True)
class FocusReward:
    """Outcome of a single Focus phase exit."""

    coins: int
    focus_seconds: int
    skipped: bool
    loop: int = 1


def coins_for_seconds(seconds: int) -> int:
    """Whole coins earned by *seconds* of completed focus."""
    if seconds <= 0:
        return 0
    return seconds // COIN_INTERVAL_SECONDS


def focus_reward(elapsed: int, *, skipped: bool, loop: int = 1) -> FocusReward:
    """Reward for leaving a Focus phase after *elapsed* seconds."""
    elapsed = max(0, elapsed)
    coins = 0 if skipped else coins_for_seconds(elapsed)
    return FocusReward(
        coins=coins, focus_seconds=elapsed, skipped=skipped, loop=loop,
    )
