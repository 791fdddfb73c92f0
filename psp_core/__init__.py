"""In-process, priority-ordered publish/subscribe engine."""

from .bus import Bus, EventProxy, global_bus, publish, subscribe, unsubscribe
from .channel import EventChannel, SubscriptionRecord
from .config import BusSettings, default_config_path, load_settings
from .engine import DispatchEngine, SubscribeConfig
from .errors import InvalidSubscriptionError, PubSubError, UnknownRequestError
from .priority_index import PriorityIndex
from .request import Publish, Subscribe, Unsubscribe
from .types import InvocationInfo, InvocationResult, Signal, Timing

__all__ = [
    "Bus",
    "EventProxy",
    "global_bus",
    "subscribe",
    "publish",
    "unsubscribe",
    "EventChannel",
    "SubscriptionRecord",
    "BusSettings",
    "default_config_path",
    "load_settings",
    "DispatchEngine",
    "SubscribeConfig",
    "PubSubError",
    "InvalidSubscriptionError",
    "UnknownRequestError",
    "PriorityIndex",
    "Subscribe",
    "Publish",
    "Unsubscribe",
    "InvocationInfo",
    "InvocationResult",
    "Signal",
    "Timing",
]
