"""
Broadcast abstraction for pushing post updates to connected clients.

Pusher is used in production; the in-memory broadcaster records events for
local runs and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import pusher


class Broadcaster(Protocol):
    """Fire-and-forget event publishing."""

    def trigger(self, channel: str, event: str, data: Any) -> None:
        ...


@dataclass
class InMemoryBroadcaster:
    """Test double that keeps every triggered event."""

    events: list[tuple[str, str, Any]] = field(default_factory=list)

    def trigger(self, channel: str, event: str, data: Any) -> None:
        self.events.append((channel, event, data))

    def reset(self) -> None:
        self.events.clear()


@dataclass
class PusherBroadcaster:
    """Hosted Pusher Channels client."""

    app_id: str
    key: str
    secret: str
    cluster: str

    def __post_init__(self):
        self._client = pusher.Pusher(
            app_id=self.app_id,
            key=self.key,
            secret=self.secret,
            cluster=self.cluster,
            ssl=True,
        )

    def trigger(self, channel: str, event: str, data: Any) -> None:
        self._client.trigger(channel, event, data)
