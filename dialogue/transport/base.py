"""SpeechTransport ABC: the boundary between the dialogue core and audio.

The dialogue session never synthesizes or recognizes anything itself.  It
hands ``Prepare``/``Speak``/``Listen`` commands to a transport, and the
transport reports back through events:

  PREPARE  → ASRTTS_READY
  SPEAK    → SPEAK_COMPLETE
  LISTEN   → RECOGNISED then LISTEN_COMPLETE, or ASR_NOINPUT on silence

Implementors may complete synchronously (from inside ``send``) or later from
another callback; the session queues events that arrive mid-transition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from pydantic import BaseModel

from dialogue.models.events import Command, DMEvent, Listen, Prepare, Speak

EventSink = Callable[[DMEvent], None]


class TransportSettings(BaseModel):
    """Recognizer/synthesizer settings.  Opaque to the dialogue core."""

    locale: str = "en-US"
    voice: str = "en-US-DavisNeural"
    no_input_timeout_ms: int = 5000
    complete_timeout_ms: int = 0


class SpeechTransport(ABC):
    """Abstract speech transport.

    Concrete transports wrap a specific speech stack (a cloud TTS/ASR
    service, a terminal, a scripted test double) and translate between its
    callbacks and the dialogue event contract.
    """

    def __init__(self, settings: Optional[TransportSettings] = None) -> None:
        self.settings = settings or TransportSettings()
        self._sink: Optional[EventSink] = None

    def bind(self, sink: EventSink) -> None:
        """Route emitted events to ``sink`` (normally ``DialogueSession.send``)."""
        self._sink = sink

    def emit(self, event: DMEvent) -> None:
        if self._sink is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to a session")
        self._sink(event)

    def send(self, command: Command) -> None:
        """Execute one command from the session."""
        if isinstance(command, Prepare):
            self.prepare()
        elif isinstance(command, Speak):
            self.speak(command.utterance)
        elif isinstance(command, Listen):
            self.listen()
        else:
            raise TypeError(f"Unknown command: {command!r}")

    @abstractmethod
    def prepare(self) -> None:
        """Initialize the speech stack; emit ``AsrTtsReady`` when done."""

    @abstractmethod
    def speak(self, utterance: str) -> None:
        """Synthesize ``utterance``; emit ``SpeakComplete`` when done."""

    @abstractmethod
    def listen(self) -> None:
        """Start recognition; emit the result events when done."""
