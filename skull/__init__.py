"""Core rules engine package for Skull."""

__all__ = [
    "discs",
    "errors",
    "player",
    "actions",
    "events",
    "round",
    "challenge",
    "match",
    "view",
    "rules_schema",
    "service",
]
