"""Core rules engine for Truco."""

__all__ = [
    "actions",
    "cards",
    "config",
    "deck",
    "errors",
    "events",
    "game",
    "scheduling",
    "service",
    "state",
    "trick",
]
