"""Error types raised by the pub/sub core."""

from __future__ import annotations


class PubSubError(Exception):
    """Base type for pub/sub failures."""


class InvalidSubscriptionError(PubSubError, ValueError):
    """Raised when a subscription configuration cannot be accepted."""


class UnknownRequestError(PubSubError, TypeError):
    """Raised when a bus is asked to execute something that is not a request."""
