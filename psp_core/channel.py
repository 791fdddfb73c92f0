"""Per-event subscriber registry and single-subscriber invocation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator

from .priority_index import PriorityIndex
from .types import InvocationInfo, InvocationResult, Signal, SubscriptionCallback, Timing

__all__ = ["SubscriptionRecord", "EventChannel"]

logger = logging.getLogger(__name__)


@dataclass
class SubscriptionRecord:
    """Configuration and runtime counters for one subscriber."""

    id: str
    callback: SubscriptionCallback
    timing: Timing = Timing.PRE
    priority: int = 0
    remaining_count: int | None = None
    invocation_count: int = 0
    context: Any = None

    @property
    def is_counted(self) -> bool:
        return self.remaining_count is not None


class EventChannel:
    """Everything one event name owns: tiers, registry and the last payload."""

    def __init__(self, name: str, label: str | None = None) -> None:
        self.name = name
        self.label = label or name
        self.subscriptions: dict[str, SubscriptionRecord] = {}
        self.pre = PriorityIndex()
        self.post = PriorityIndex()
        self.default_id: str | None = None
        self.last_payload: Any = {}
        self.has_published = False

    def tier(self, timing: Timing) -> PriorityIndex:
        if timing is Timing.POST:
            return self.post
        if timing is Timing.PRE:
            return self.pre
        raise ValueError("the default tier has no priority index")

    def get(self, subscriber_id: str) -> SubscriptionRecord | None:
        return self.subscriptions.get(subscriber_id)

    def __contains__(self, subscriber_id: object) -> bool:
        return subscriber_id in self.subscriptions

    def __len__(self) -> int:
        return len(self.subscriptions)

    def ordered_ids(self) -> Iterator[str]:
        """Ids in the order a publish would reach them."""
        yield from self.pre.ids()
        if self.default_id is not None:
            yield self.default_id
        yield from self.post.ids()

    def is_placed(self, record: SubscriptionRecord, timing: Timing, priority: int) -> bool:
        """True when ``record`` is still the live entry at ``timing``/``priority``."""
        if self.subscriptions.get(record.id) is not record:
            return False
        return record.timing is timing and record.priority == priority

    # ---------- Registry mutation ----------

    def place(self, record: SubscriptionRecord) -> None:
        """Install ``record``, replacing any subscriber that already uses its id."""
        self.discard(record.id, untrack=False)
        record.invocation_count = 0
        self.subscriptions[record.id] = record

        if record.timing is Timing.DEFAULT:
            previous = self.default_id
            if previous is not None and previous != record.id:
                logger.debug("%s: evicting default subscriber %s", self.label, previous)
                self.discard(previous)
            self.default_id = record.id
            return

        self.tier(record.timing).insert(record.priority, record.id)

    def discard(self, subscriber_id: str, *, untrack: bool = True) -> bool:
        """Remove the placement of ``subscriber_id`` and, with ``untrack``, its record."""
        record = self.subscriptions.get(subscriber_id)
        if record is None:
            logger.debug("%s: nothing to remove for %s", self.label, subscriber_id)
            return False

        if record.timing is Timing.DEFAULT:
            if self.default_id == subscriber_id:
                self.default_id = None
        else:
            self.tier(record.timing).remove(record.priority, subscriber_id)

        if untrack:
            del self.subscriptions[subscriber_id]
            logger.debug("%s: removed %s", self.label, subscriber_id)
        return True

    def discard_matching(self, pattern: re.Pattern[str]) -> list[str]:
        """Remove every subscriber whose id matches ``pattern``."""
        matched = [subscriber_id for subscriber_id in self.subscriptions if pattern.search(subscriber_id)]
        for subscriber_id in matched:
            self.discard(subscriber_id)
        return matched

    # ---------- Invocation ----------

    def invoke(self, subscriber_id: str, payload: Any = None) -> InvocationResult:
        """Run one subscriber and apply its count/self-removal rules.

        ``payload=None`` replays ``last_payload``. ``remaining_count`` is only
        decremented once the callback returns, so a counted subscriber that
        publishes to its own event from inside the callback runs again before
        its count is consumed.
        """
        record = self.subscriptions.get(subscriber_id)
        if record is None or not callable(record.callback):
            return InvocationResult.ABSENT
        if payload is None:
            payload = self.last_payload

        result: Any = None
        if not record.is_counted or record.remaining_count > 0:
            record.invocation_count += 1
            info = InvocationInfo(
                subscription_id=subscriber_id,
                invocation_count=record.invocation_count,
                context=record.context,
            )
            try:
                result = record.callback(payload, info)
            except Exception:
                logger.exception("%s: subscriber %s raised", self.label, subscriber_id)
                result = None

        if self._should_remove(record, result):
            logger.debug("%s: subscriber %s removed itself (%s)", self.label, subscriber_id, result)
            # the callback may already have replaced or removed this id
            if self.subscriptions.get(subscriber_id) is record:
                self.discard(subscriber_id)
            return InvocationResult.REMOVED
        return InvocationResult.KEPT

    @staticmethod
    def _should_remove(record: SubscriptionRecord, result: Any) -> bool:
        if result is Signal.UNSUBSCRIBE:
            return True
        if result is Signal.SKIP_DECREMENT or not record.is_counted:
            return False
        record.remaining_count -= 1
        return record.remaining_count <= 0

    def __repr__(self) -> str:
        return f"EventChannel(name={self.name!r}, subscribers={len(self.subscriptions)})"
