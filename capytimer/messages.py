"""Encouraging speech-bubble messages shown during a session.

Purely decorative: nothing here feeds back into the timer.  Focus
messages are picked by progress through the *current* focus block
(early < 25 %, middle < 75 %, late otherwise).
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .timer.session import Phase, RunState, SessionState, progress_ratio


@dataclass(frozen=True)
class Message:
    text: str
    mood: str  # encouraging | excited | calm | proud


def _pool(*pairs: tuple[str, str]) -> tuple[Message, ...]:
    return tuple(Message(text, mood) for text, mood in pairs)


MESSAGES: dict[str, tuple[Message, ...]] = {
    "prep": _pool(
        ("Let's get ready to focus!", "excited"),
        ("Take a deep breath", "calm"),
        ("Prepare your workspace", "calm"),
        ("You've got this!", "encouraging"),
        ("Time to get cozy", "calm"),
    ),
    "focus_early": _pool(
        ("Great start!", "encouraging"),
        ("Let's focus together", "calm"),
        ("You're doing amazing", "encouraging"),
        ("Stay strong!", "encouraging"),
        ("I believe in you", "encouraging"),
        ("Keep going!", "encouraging"),
    ),
    "focus_middle": _pool(
        ("Don't give up!", "encouraging"),
        ("You're halfway there", "encouraging"),
        ("Stay focused", "calm"),
        ("Keep pushing forward", "encouraging"),
        ("You're doing great", "encouraging"),
        ("Almost there!", "excited"),
        ("Focus like a capybara", "calm"),
    ),
    "focus_late": _pool(
        ("Almost there!", "excited"),
        ("Final stretch!", "excited"),
        ("You can do it!", "encouraging"),
        ("So close now!", "excited"),
        ("Push through!", "encouraging"),
        ("The end is near!", "excited"),
    ),
    "break": _pool(
        ("Great job! Take a rest", "proud"),
        ("You earned this break", "proud"),
        ("Relax like a capybara", "calm"),
        ("Stretch those muscles", "calm"),
        ("Recharge your energy", "calm"),
        ("Well deserved break!", "proud"),
    ),
    "completion": _pool(
        ("You did it!", "proud"),
        ("Amazing work!", "proud"),
        ("I'm so proud of you!", "proud"),
        ("Perfect focus session!", "proud"),
        ("You're incredible!", "proud"),
        ("Mission accomplished!", "excited"),
    ),
    "paused": _pool(
        ("Take your time", "calm"),
        ("I'll wait for you", "calm"),
        ("Ready when you are", "calm"),
        ("No rush, friend", "calm"),
    ),
}

_PHASE_CATEGORIES = {
    Phase.PREPARATION: "prep",
    Phase.FOCUS: "focus",
    Phase.BREAK: "break",
    Phase.COMPLETED: "completion",
}

MIN_MESSAGE_INTERVAL_MS = 10_000
MAX_MESSAGE_INTERVAL_MS = 20_000
MAX_MESSAGE_CHANCE = 0.4


def _focus_pool(progress_percentage: float | None) -> str:
    if progress_percentage is None:
        return "focus_middle"
    if progress_percentage < 25:
        return "focus_early"
    if progress_percentage < 75:
        return "focus_middle"
    return "focus_late"


def select_message(
    category: str,
    progress_percentage: float | None = None,
    rng: random.Random | None = None,
) -> Message:
    """Pick a random message for *category*.

    *category* is one of ``prep``, ``focus``, ``break``, ``completion``
    or ``paused``; unknown categories fall back to the mid-focus pool.
    """
    rng = rng or random.Random()
    if category == "focus":
        key = _focus_pool(progress_percentage)
    elif category in MESSAGES:
        key = category
    else:
        key = "focus_middle"
    return rng.choice(MESSAGES[key])


def message_for(state: SessionState, rng: random.Random | None = None) -> Message:
    """Pick a message matching the session's phase and run state."""
    if state.run_state == RunState.PAUSED:
        return select_message("paused", rng=rng)
    category = _PHASE_CATEGORIES[state.phase]
    return select_message(category, progress_ratio(state) * 100, rng=rng)


def should_show_message(
    ms_since_last: float, rng: random.Random | None = None
) -> bool:
    """Randomly decide whether a new message is due.

    Never within 10 s of the last one; after that the chance ramps
    linearly up to 40 % at 20 s.
    """
    if ms_since_last <= MIN_MESSAGE_INTERVAL_MS:
        return False
    rng = rng or random.Random()
    window = MAX_MESSAGE_INTERVAL_MS - MIN_MESSAGE_INTERVAL_MS
    ramp = min((ms_since_last - MIN_MESSAGE_INTERVAL_MS) / window, 1.0)
    return rng.random() < ramp * MAX_MESSAGE_CHANCE
