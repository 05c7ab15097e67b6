"""Data models for the dialogue manager."""

from .events import (
    AsrNoInput,
    AsrTtsReady,
    Click,
    Command,
    DMEvent,
    Hypothesis,
    Listen,
    ListenComplete,
    Prepare,
    Recognised,
    Speak,
    SpeakComplete,
    parse_event,
)
from .slots import AppointmentDetails, DialogueContext, SlotRecord

__all__ = [
    "AppointmentDetails",
    "AsrNoInput",
    "AsrTtsReady",
    "Click",
    "Command",
    "DMEvent",
    "DialogueContext",
    "Hypothesis",
    "Listen",
    "ListenComplete",
    "Prepare",
    "Recognised",
    "SlotRecord",
    "Speak",
    "SpeakComplete",
    "parse_event",
]
