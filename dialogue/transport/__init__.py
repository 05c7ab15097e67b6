"""Speech transports: adapters between dialogue commands and audio."""

from .base import EventSink, SpeechTransport, TransportSettings
from .console import ConsoleTransport

__all__ = ["ConsoleTransport", "EventSink", "SpeechTransport", "TransportSettings"]
