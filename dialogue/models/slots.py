"""Pydantic models for the values gathered during a dialogue."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .events import Hypothesis


class SlotRecord(BaseModel):
    """Partial slot values interpreted from the most recent utterance.

    Only the fields the matched grammar entry carries are set; an utterance
    outside the grammar yields an empty record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    person: Optional[str] = None
    day: Optional[str] = None
    time: Optional[str] = Field(default=None, pattern=r"^\d{2}:00$")
    value: Optional[bool] = None
    type: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class AppointmentDetails(BaseModel):
    """The appointment being built up, one slot per successful prompt.

    The set of populated fields always mirrors which prompts have already
    succeeded, so it doubles as the "where were we" marker for no-input
    recovery.
    """

    person: Optional[str] = None
    day: Optional[str] = None
    whole_day: Optional[bool] = None
    time: Optional[str] = None

    def missing_slot(self) -> str | None:
        """Return the first slot still to be asked for, or None."""
        if not self.person:
            return "person"
        if not self.day:
            return "day"
        if self.whole_day is None:
            return "whole_day"
        if self.whole_day is False and not self.time:
            return "time"
        return None


class DialogueContext(BaseModel):
    """Mutable data owned by one dialogue session."""

    last_result: Optional[list[Hypothesis]] = None
    metadata: Optional[SlotRecord] = None
    appointment_details: AppointmentDetails = Field(default_factory=AppointmentDetails)

    @property
    def last_utterance(self) -> str:
        if not self.last_result:
            return ""
        return self.last_result[0].utterance
