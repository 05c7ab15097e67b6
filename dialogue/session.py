"""Dialogue session: drives the state machine from transport events.

A DialogueSession:
  1. Owns the current state and the DialogueContext
  2. Feeds each incoming event through ``machine.transition``
  3. Hands the resulting commands to the speech transport, in order
  4. Processes events strictly one at a time; events raised while a
     transition is being dispatched are queued and handled afterwards
"""

from __future__ import annotations

import logging
import secrets
from collections import deque
from typing import Any, Optional, Union

from dialogue.debug_events import DebugBroadcaster
from dialogue.grammar.table import DEFAULT_GRAMMAR, Grammar
from dialogue.machine import State, Transition, initial_state, transition
from dialogue.models.events import Command, DMEvent, parse_event
from dialogue.models.slots import AppointmentDetails, DialogueContext
from dialogue.transport.base import SpeechTransport

log = logging.getLogger("dialogue.session")


class DialogueSession:
    """One spoken dialogue, restartable after it reaches Done.

    Typical lifecycle::

        transport = ConsoleTransport()
        session = DialogueSession(transport=transport)
        session.start()           # → PREPARE; transport answers ASRTTS_READY
        session.send(Click())     # → greeting, then whatever the user says
    """

    def __init__(
        self,
        transport: Optional[SpeechTransport] = None,
        grammar: Optional[Grammar] = None,
        broadcaster: Optional[DebugBroadcaster] = None,
    ) -> None:
        self._session_id = secrets.token_urlsafe(9)
        self._grammar = grammar or DEFAULT_GRAMMAR
        self._transport = transport
        self._debug_broadcaster = broadcaster

        self._state: Optional[State] = None
        self._context = DialogueContext()

        self._queue: deque[DMEvent] = deque()
        self._processing = False

        if transport is not None:
            transport.bind(self.send)

    # ── Public API ────────────────────────────────────────────

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> Optional[State]:
        return self._state

    @property
    def context(self) -> DialogueContext:
        return self._context

    @property
    def appointment_details(self) -> AppointmentDetails:
        return self._context.appointment_details

    @property
    def is_started(self) -> bool:
        return self._state is not None

    @property
    def is_done(self) -> bool:
        return self._state is State.DONE

    def attach_broadcaster(self, broadcaster: DebugBroadcaster) -> None:
        """Attach a debug broadcaster for real-time event streaming."""
        self._debug_broadcaster = broadcaster

    def start(self) -> None:
        """Enter the initial state and ask the transport to prepare."""
        if self.is_started:
            raise RuntimeError("Session already started")
        log.info("Session %s started", self._session_id)
        try:
            self._run(lambda: initial_state(self._context, self._grammar), "start")
        except Exception:
            # not started until the transport has accepted PREPARE
            self._state = None
            raise
        self._drain()

    def send(self, event: Union[DMEvent, dict[str, Any]]) -> None:
        """Process one event (or queue it if another is in flight)."""
        if isinstance(event, dict):
            event = parse_event(event)
        if not self.is_started:
            raise RuntimeError(f"Session not started; cannot handle {event.type}")

        self._queue.append(event)
        if self._processing:
            log.debug("Queued %s (busy)", event.type)
            return
        self._drain()

    def to_dict(self, detail: bool = False) -> dict[str, Any]:
        """Serialize session status for a presentation layer."""
        d: dict[str, Any] = {
            "session_id": self._session_id,
            "state": self._state.value if self._state else None,
            "phase": self._state.phase if self._state else None,
            "is_done": self.is_done,
            "appointment_details": self.appointment_details.model_dump(),
        }
        if detail:
            metadata = self._context.metadata
            d["metadata"] = metadata.model_dump(exclude_none=True) if metadata else None
            d["last_utterance"] = self._context.last_utterance
            d["queued_events"] = len(self._queue)
            if self._debug_broadcaster:
                d["event_log"] = self._debug_broadcaster.event_log
        return d

    # ── Internal ──────────────────────────────────────────────

    def _drain(self) -> None:
        while self._queue:
            queued = self._queue.popleft()
            self._run(
                lambda: transition(self._state, queued, self._context, self._grammar),
                queued.type,
                queued,
            )

    def _run(self, step_fn, label: str, event: Optional[DMEvent] = None) -> None:
        self._processing = True
        try:
            if event is not None:
                self._emit_event("event", {"event": event.model_dump()})
            step: Transition = step_fn()
            self._apply(step, label)
            self._dispatch(step.commands)
        except Exception:
            self._queue.clear()
            raise
        finally:
            self._processing = False

    def _apply(self, step: Transition, label: str) -> None:
        previous = self._state
        self._state = step.state
        self._context = step.context

        if not step.handled:
            log.debug("Ignored %s in %s", label, previous.value if previous else None)
            self._emit_event("ignored", {"event": label})
            return

        if previous is not step.state:
            log.info(
                "FSM advance: %s → %s (event: %s)",
                previous.value if previous else "-", step.state.value, label,
            )
            self._emit_event("transition", {
                "from": previous.value if previous else None,
                "to": step.state.value,
                "event": label,
            })
        log.debug("Context after %s: %s", label, self._context.model_dump(exclude_none=True))

    def _dispatch(self, commands: list[Command]) -> None:
        for command in commands:
            log.debug("Command: %s", command.model_dump())
            self._emit_event("command", command.model_dump())
            if self._transport is not None:
                self._transport.send(command)

    def _emit_event(self, event_type: str, data: dict) -> None:
        """Emit a debug event if a broadcaster is attached."""
        if self._debug_broadcaster:
            state_id = self._state.value if self._state else ""
            self._debug_broadcaster.emit(event_type, state_id, data)
