"""Per-session debug event broadcaster for status displays.

A DialogueSession can have a DebugBroadcaster attached.  Every incoming
event, state change and outgoing command is pushed to each subscriber's
asyncio.Queue, so a presentation layer can render the current state without
reaching into the session.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TypedDict

log = logging.getLogger("dialogue.debug_events")


class DebugEvent(TypedDict):
    type: str          # event | transition | command | ignored
    timestamp: float
    session_id: str
    state_id: str
    data: dict


class DebugBroadcaster:
    """Per-session event broadcaster using asyncio.Queue per subscriber."""

    def __init__(self, session_id: str, max_log: int = 1000) -> None:
        self._session_id = session_id
        self._subscribers: list[asyncio.Queue[DebugEvent]] = []
        self._event_log: list[DebugEvent] = []
        self._max_log = max_log

    @property
    def session_id(self) -> str:
        return self._session_id

    def subscribe(self) -> asyncio.Queue[DebugEvent]:
        """Create a new subscriber queue and return it."""
        q: asyncio.Queue[DebugEvent] = asyncio.Queue(maxsize=200)
        self._subscribers.append(q)
        log.info("Debug subscriber added for session %s (total: %d)",
                 self._session_id, len(self._subscribers))
        return q

    def unsubscribe(self, q: asyncio.Queue[DebugEvent]) -> None:
        """Remove a subscriber queue."""
        if q in self._subscribers:
            self._subscribers.remove(q)
        log.info("Debug subscriber removed for session %s (total: %d)",
                 self._session_id, len(self._subscribers))

    def emit(self, event_type: str, state_id: str, data: dict) -> None:
        """Broadcast an event to all subscribers and append to event log."""
        event: DebugEvent = {
            "type": event_type,
            "timestamp": time.time(),
            "session_id": self._session_id,
            "state_id": state_id,
            "data": data,
        }
        self._event_log.append(event)
        if len(self._event_log) > self._max_log:
            del self._event_log[: len(self._event_log) - self._max_log]

        for q in self._subscribers:
            if q.full():
                # Drop oldest event to make room
                q.get_nowait()
            q.put_nowait(event)

    @property
    def event_log(self) -> list[DebugEvent]:
        """Full event history, oldest first."""
        return list(self._event_log)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
