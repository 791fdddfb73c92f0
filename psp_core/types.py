"""Shared enums and value types for the dispatch engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

__all__ = [
    "Timing",
    "Signal",
    "InvocationResult",
    "InvocationInfo",
    "SubscriptionCallback",
]


class Timing(Enum):
    """Delivery tiers, in the order a publish walks them."""

    PRE = "pre"
    DEFAULT = "default"
    POST = "post"

    @classmethod
    def coerce(cls, value: Any) -> "Timing":
        """Return the matching tier, falling back to ``PRE`` for anything unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "def":
                return cls.DEFAULT
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.PRE


class Signal(Enum):
    """Values a callback may return to steer its own lifecycle."""

    UNSUBSCRIBE = "unsubscribe"
    SKIP_DECREMENT = "skip_decrement"


class InvocationResult(Enum):
    REMOVED = "removed"
    KEPT = "kept"
    ABSENT = "absent"


@dataclass(frozen=True)
class InvocationInfo:
    """Passed to every callback as its second argument."""

    subscription_id: str
    invocation_count: int
    context: Any = None

    UNSUBSCRIBE = Signal.UNSUBSCRIBE
    SKIP_DECREMENT = Signal.SKIP_DECREMENT


SubscriptionCallback = Callable[[Any, InvocationInfo], Any]
