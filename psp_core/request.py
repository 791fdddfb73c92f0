"""Explicit request variants accepted by :meth:`psp_core.bus.Bus.execute`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from .engine import SubscribeConfig, UnsubscribeTarget


@dataclass(frozen=True)
class Subscribe:
    event_name: str
    config: SubscribeConfig


@dataclass(frozen=True)
class Publish:
    event_names: str | Sequence[str]
    payload: Any = None


@dataclass(frozen=True)
class Unsubscribe:
    event_name: str
    target: UnsubscribeTarget


Request = Union[Subscribe, Publish, Unsubscribe]
