"""Pydantic models for the speech transport contract.

Events flow from the transport (and the presentation layer's start button)
into the dialogue session; commands flow the other way.  Both are tagged by
a ``type`` literal so raw dicts coming off a socket can be validated with
``parse_event``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class Hypothesis(BaseModel):
    """One recognizer hypothesis.  Only the first one of a result is used."""

    utterance: str
    confidence: float = 1.0


# ── Events: transport / presentation → session ───────────────────

class AsrTtsReady(BaseModel):
    type: Literal["ASRTTS_READY"] = "ASRTTS_READY"


class SpeakComplete(BaseModel):
    type: Literal["SPEAK_COMPLETE"] = "SPEAK_COMPLETE"


class ListenComplete(BaseModel):
    type: Literal["LISTEN_COMPLETE"] = "LISTEN_COMPLETE"


class Recognised(BaseModel):
    type: Literal["RECOGNISED"] = "RECOGNISED"
    value: list[Hypothesis] = Field(min_length=1)

    @property
    def utterance(self) -> str:
        return self.value[0].utterance


class AsrNoInput(BaseModel):
    type: Literal["ASR_NOINPUT"] = "ASR_NOINPUT"


class Click(BaseModel):
    """Start trigger from the presentation layer."""

    type: Literal["CLICK"] = "CLICK"


DMEvent = Annotated[
    Union[AsrTtsReady, SpeakComplete, ListenComplete, Recognised, AsrNoInput, Click],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[DMEvent] = TypeAdapter(DMEvent)


def parse_event(data: dict[str, Any]) -> DMEvent:
    """Validate a raw event dict into its event model.

    Raises ``pydantic.ValidationError`` on an unknown ``type`` or an empty
    hypothesis list.
    """
    return _event_adapter.validate_python(data)


# ── Commands: session → transport ────────────────────────────────

class Prepare(BaseModel):
    type: Literal["PREPARE"] = "PREPARE"


class Speak(BaseModel):
    type: Literal["SPEAK"] = "SPEAK"
    utterance: str


class Listen(BaseModel):
    type: Literal["LISTEN"] = "LISTEN"


Command = Annotated[Union[Prepare, Speak, Listen], Field(discriminator="type")]
