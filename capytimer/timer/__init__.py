"""Timer package."""

from .engine import TimerEngine, TICK_INTERVAL_MS
from .rewards import COIN_INTERVAL_SECONDS, FocusReward, coins_for_seconds, focus_reward
from .session import (
    ConfigurationError,
    Phase,
    RunState,
    SessionState,
    TimerConfiguration,
    PREPARATION_DURATION,
    format_time,
    total_configured_duration,
)

__all__ = [
    "TimerEngine",
    "TICK_INTERVAL_MS",
    "COIN_INTERVAL_SECONDS",
    "FocusReward",
    "coins_for_seconds",
    "focus_reward",
    "ConfigurationError",
    "Phase",
    "RunState",
    "SessionState",
    "TimerConfiguration",
    "PREPARATION_DURATION",
    "format_time",
    "total_configured_duration",
]
