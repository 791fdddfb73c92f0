"""Named bus instances, event proxies and the process-wide global bus."""

from __future__ import annotations

import random
from typing import Any, Callable, Sequence

from .channel import EventChannel
from .config import BusSettings, load_settings
from .engine import DispatchEngine, SubscribeConfig, UnsubscribeTarget
from .errors import UnknownRequestError
from .logs import get_logger, set_debug_logging
from .request import Publish, Request, Subscribe, Unsubscribe
from .types import SubscriptionCallback

__all__ = ["Bus", "EventProxy", "global_bus", "subscribe", "publish", "unsubscribe"]


class Bus:
    """An independent set of event channels.

    Buses never share channels; two buses with the same namespace are still
    separate instances.
    """

    def __init__(self, namespace: str | None = None, *, settings: BusSettings | None = None) -> None:
        self.settings = settings or BusSettings()
        if not isinstance(namespace, str) or not namespace:
            namespace = f"PSP{random.randint(1, 10_000_000)}"
        self.namespace = namespace
        self.logger = get_logger("bus", namespace)
        if self.settings.debug:
            set_debug_logging(True)
        self.engine = DispatchEngine(namespace, id_prefix=self.settings.id_prefix)

    def subscribe(
        self,
        event_name: str,
        callback: SubscriptionCallback | None,
        *,
        id: str | None = None,
        priority: Any = 0,
        timing: Any = "pre",
        remaining_count: Any = None,
        republish: bool = False,
        context: Any = None,
    ) -> bool | None:
        config = SubscribeConfig(
            callback=callback,
            id=id,
            priority=priority,
            timing=timing,
            remaining_count=remaining_count,
            republish=republish,
            context=context,
        )
        result = self.engine.subscribe(event_name, config)
        if result is None:
            self.logger.debug("subscription to %s was invalid and was not registered", event_name)
        return result

    def publish(self, event_names: str | Sequence[str], payload: Any = None) -> "Bus":
        """Publish ``payload`` to one event, or to each event of a list in order."""
        if isinstance(event_names, str):
            event_names = (event_names,)
        elif not isinstance(event_names, (list, tuple)):
            self.logger.debug("nothing to publish for %r", event_names)
            return self
        for event_name in event_names:
            if isinstance(event_name, str) and event_name:
                self.engine.publish(event_name, payload)
        return self

    def unsubscribe(self, event_name: str, target: UnsubscribeTarget) -> "Bus":
        self.logger.debug("unsubscribing %r from %s", target, event_name)
        self.engine.unsubscribe(event_name, target)
        return self

    def get_channel(self, event_name: str, create: bool = True) -> EventChannel | None:
        return self.engine.get_channel(event_name, create)

    def execute(self, request: Request) -> Any:
        """Run a :mod:`psp_core.request` variant against this bus."""
        if isinstance(request, Subscribe):
            return self.engine.subscribe(request.event_name, request.config)
        if isinstance(request, Publish):
            return self.publish(request.event_names, request.payload)
        if isinstance(request, Unsubscribe):
            return self.unsubscribe(request.event_name, request.target)
        raise UnknownRequestError(f"cannot execute {type(request).__name__}")

    def publisher(self, event_name: str) -> Callable[[Any], None]:
        """Return a callable that publishes its argument to ``event_name``."""

        def _publish(payload: Any = None) -> None:
            self.publish(event_name, payload)

        return _publish

    def event_proxy(self, event_name: str) -> "EventProxy":
        return EventProxy(self, event_name)

    def __repr__(self) -> str:
        return f"Bus(namespace={self.namespace!r})"


class EventProxy:
    """Chainable ``pub`` / ``sub`` / ``unsub`` bound to a single event."""

    def __init__(self, bus: Bus, event_name: str) -> None:
        self.bus = bus
        self.event_name = event_name

    def pub(self, payload: Any = None) -> "EventProxy":
        self.bus.publish(self.event_name, payload)
        return self

    def sub(self, callback: SubscriptionCallback, **options: Any) -> "EventProxy":
        self.bus.subscribe(self.event_name, callback, **options)
        return self

    def unsub(self, target: UnsubscribeTarget) -> "EventProxy":
        self.bus.unsubscribe(self.event_name, target)
        return self


_settings = load_settings()
_GLOBAL_BUS = Bus(_settings.global_namespace, settings=_settings)


def global_bus() -> Bus:
    """The implicit process-wide bus, created once at import."""
    return _GLOBAL_BUS


def subscribe(event_name: str, callback: SubscriptionCallback | None, **options: Any) -> bool | None:
    return _GLOBAL_BUS.subscribe(event_name, callback, **options)


def publish(event_names: str | Sequence[str], payload: Any = None) -> Bus:
    return _GLOBAL_BUS.publish(event_names, payload)


def unsubscribe(event_name: str, target: UnsubscribeTarget) -> Bus:
    return _GLOBAL_BUS.unsubscribe(event_name, target)
