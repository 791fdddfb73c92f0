"""Subscribe, publish and unsubscribe against a set of event channels."""

from __future__ import annotations

import logging
import math
import re
import uuid
from dataclasses import dataclass
from typing import Any, Collection, Union

from .channel import EventChannel, SubscriptionRecord
from .errors import InvalidSubscriptionError
from .types import SubscriptionCallback, Timing

__all__ = ["SubscribeConfig", "DispatchEngine", "UnsubscribeTarget", "DEFAULT_ID_PREFIX"]

logger = logging.getLogger(__name__)

DEFAULT_ID_PREFIX = "pr-"

UnsubscribeTarget = Union[str, re.Pattern, Collection[str]]


def _coerce_priority(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _coerce_count(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidSubscriptionError(f"remaining_count must be a positive integer, got {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise InvalidSubscriptionError(
                f"remaining_count must be a positive integer, got {value!r}"
            ) from exc
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidSubscriptionError(f"remaining_count must be a positive integer, got {value!r}")
    return value


@dataclass
class SubscribeConfig:
    """Options accepted by :meth:`DispatchEngine.subscribe`."""

    callback: SubscriptionCallback | None
    id: str | None = None
    priority: Any = 0
    timing: Any = Timing.PRE
    remaining_count: Any = None
    republish: bool = False
    context: Any = None

    def validate(self) -> None:
        if not callable(self.callback):
            raise InvalidSubscriptionError("callback must be callable")
        _coerce_count(self.remaining_count)

    def to_record(self, subscriber_id: str) -> SubscriptionRecord:
        self.validate()
        return SubscriptionRecord(
            id=subscriber_id,
            callback=self.callback,
            timing=Timing.coerce(self.timing),
            priority=_coerce_priority(self.priority),
            remaining_count=_coerce_count(self.remaining_count),
            context=self.context,
        )


class DispatchEngine:
    """Own the channels of one bus and implement the delivery order.

    A publish walks ``pre`` (highest priority first), then the default slot,
    then ``post``. Callbacks may subscribe, unsubscribe or publish while a
    publish is running; subscribers added to a bucket that is already being
    walked wait for the next publish.
    """

    def __init__(self, name: str = "", *, id_prefix: str = DEFAULT_ID_PREFIX) -> None:
        self.name = name
        self.id_prefix = id_prefix
        self._channels: dict[str, EventChannel] = {}

    def get_channel(self, event_name: str, create: bool = True) -> EventChannel | None:
        channel = self._channels.get(event_name)
        if channel is None and create:
            logger.debug("%s: creating channel %s", self.name, event_name)
            channel = self._channels[event_name] = EventChannel(
                event_name, label=f"{self.name}::{event_name}" if self.name else event_name
            )
        return channel

    def channels(self) -> tuple[EventChannel, ...]:
        return tuple(self._channels.values())

    def event_names(self) -> tuple[str, ...]:
        return tuple(self._channels)

    def generate_id(self) -> str:
        return f"{self.id_prefix}{uuid.uuid4().hex}"

    # ---------- Subscribe ----------

    def subscribe(self, event_name: str, config: SubscribeConfig) -> bool | None:
        """Register ``config`` on ``event_name``; returns ``None`` when rejected."""
        if not isinstance(event_name, str) or not event_name:
            logger.debug("%s: rejected subscription without an event name", self.name)
            return None
        subscriber_id = config.id if isinstance(config.id, str) and config.id else self.generate_id()
        try:
            record = config.to_record(subscriber_id)
        except InvalidSubscriptionError as exc:
            logger.debug("%s: rejected subscription to %s: %s", self.name, event_name, exc)
            return None

        channel = self.get_channel(event_name)
        channel.place(record)

        if config.republish and channel.has_published:
            logger.debug("%s: re-publishing %s to %s", self.name, event_name, subscriber_id)
            channel.invoke(subscriber_id)
        return True

    # ---------- Publish ----------

    def publish(self, event_name: str, payload: Any = None) -> None:
        channel = self.get_channel(event_name)
        if payload is None:
            payload = {}
        channel.last_payload = payload
        channel.has_published = True

        self._publish_tier(channel, Timing.PRE, payload)
        if channel.default_id is not None:
            channel.invoke(channel.default_id, payload)
        self._publish_tier(channel, Timing.POST, payload)

    def _publish_tier(self, channel: EventChannel, timing: Timing, payload: Any) -> None:
        index = channel.tier(timing)
        # keys inserted below the cursor during the walk are still reached
        priority = index.highest()
        while priority is not None:
            for subscriber_id in index.bucket(priority):
                record = channel.get(subscriber_id)
                # removed or moved by an earlier callback in this publish
                if record is None or not channel.is_placed(record, timing, priority):
                    continue
                channel.invoke(subscriber_id, payload)
            priority = index.next_below(priority)

    # ---------- Unsubscribe ----------

    def unsubscribe(self, event_name: str, target: UnsubscribeTarget) -> None:
        """Remove one id, several ids, or every id matching a compiled pattern."""
        channel = self.get_channel(event_name, create=False)
        if channel is None:
            return
        if isinstance(target, re.Pattern):
            channel.discard_matching(target)
            return
        if isinstance(target, str):
            channel.discard(target)
            return
        if not isinstance(target, (list, tuple, set, frozenset)):
            logger.debug("%s: nothing to unsubscribe for %r", channel.label, target)
            return
        for subscriber_id in list(target):
            if isinstance(subscriber_id, str):
                channel.discard(subscriber_id)

