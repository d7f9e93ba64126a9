"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/CapyTimer/settings.json

Usage::

    settings = load_settings()
    settings.loop_count = 2
    save_settings(settings)
    engine = TimerEngine(settings.to_configuration())
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.session import TimerConfiguration

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "CapyTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    focus_duration: int = 25 * 60          # seconds
    break_duration: int = 5 * 60
    loop_count: int = 4
    has_preparation_phase: bool = False
    count_up: bool = False

    # ── messages ──────────────────────────────────────────────────────
    show_messages: bool = True

    def to_configuration(self) -> TimerConfiguration:
        """Build a validated ``TimerConfiguration``.

        Raises ``ConfigurationError`` if the stored values are out of range.
        """
        return TimerConfiguration(
            focus_duration=self.focus_duration,
            break_duration=self.break_duration,
            loop_count=self.loop_count,
            has_preparation_phase=self.has_preparation_phase,
            count_up=self.count_up,
        )


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return Settings(**filtered)
    except (OSError, ValueError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
        return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
