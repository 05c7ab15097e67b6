"""ConsoleTransport: a text terminal standing in for TTS and ASR.

Spoken output is printed, recognition reads a line from stdin.  A blank
line counts as silence.  Every command completes synchronously, so a whole
conversation runs inside the ``send`` call that started it.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from dialogue.models.events import (
    AsrNoInput,
    AsrTtsReady,
    Hypothesis,
    ListenComplete,
    Recognised,
    SpeakComplete,
)
from dialogue.transport.base import SpeechTransport, TransportSettings

log = logging.getLogger("dialogue.console")


class ConsoleTransport(SpeechTransport):
    """Terminal transport.  ``input_fn``/``output_fn`` are injectable for tests."""

    def __init__(
        self,
        settings: Optional[TransportSettings] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__(settings)
        self._input = input_fn or input
        self._output = output_fn or print

    def prepare(self) -> None:
        log.info(
            "Console transport ready (locale=%s voice=%s)",
            self.settings.locale, self.settings.voice,
        )
        self.emit(AsrTtsReady())

    def speak(self, utterance: str) -> None:
        self._output(f"SYSTEM: {utterance}")
        self.emit(SpeakComplete())

    def listen(self) -> None:
        # EOFError propagates: the caller decides whether that ends the run
        text = self._input("YOU: ").strip()
        if not text:
            log.debug("No input")
            self.emit(AsrNoInput())
            return
        self.emit(Recognised(value=[Hypothesis(utterance=text, confidence=1.0)]))
        self.emit(ListenComplete())
