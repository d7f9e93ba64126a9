"""Gamification package."""

from .coins import CoinBank, COINS_STORAGE_KEY, FOCUS_TIME_STORAGE_KEY

__all__ = [
    "CoinBank",
    "COINS_STORAGE_KEY",
    "FOCUS_TIME_STORAGE_KEY",
]
