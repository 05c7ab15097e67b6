"""Tests for slot records, appointment details and the event contract."""

import itertools

import pytest
from pydantic import ValidationError

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dialogue.models import (
    AppointmentDetails,
    AsrNoInput,
    Click,
    DialogueContext,
    Hypothesis,
    Recognised,
    SlotRecord,
    parse_event,
)


class TestSlotRecord:
    def test_empty(self):
        assert SlotRecord().is_empty()

    def test_false_value_is_not_empty(self):
        assert not SlotRecord(value=False).is_empty()

    def test_frozen(self):
        record = SlotRecord(person="Bora Kara")
        with pytest.raises(ValidationError):
            record.person = "Someone Else"

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            SlotRecord(colour="red")

    def test_time_must_be_on_the_hour(self):
        assert SlotRecord(time="09:00").time == "09:00"
        for bad in ("whenever", "9:00", "09:30"):
            with pytest.raises(ValidationError):
                SlotRecord(time=bad)


def _first_missing(person, day, whole_day, time):
    if person is None:
        return "person"
    if day is None:
        return "day"
    if whole_day is None:
        return "whole_day"
    if whole_day is False and time is None:
        return "time"
    return None


class TestAppointmentDetails:
    def test_empty_details_miss_person(self):
        assert AppointmentDetails().missing_slot() == "person"

    def test_whole_day_skips_time(self):
        details = AppointmentDetails(person="Bora Kara", day="Monday", whole_day=True)
        assert details.missing_slot() is None

    def test_not_whole_day_needs_time(self):
        details = AppointmentDetails(person="Bora Kara", day="Monday", whole_day=False)
        assert details.missing_slot() == "time"

    def test_every_combination(self):
        for person, day, whole_day, time in itertools.product(
            [None, "Bora Kara"], [None, "Monday"], [None, True, False], [None, "10:00"],
        ):
            details = AppointmentDetails(person=person, day=day, whole_day=whole_day, time=time)
            assert details.missing_slot() == _first_missing(person, day, whole_day, time), details


class TestDialogueContext:
    def test_defaults(self):
        ctx = DialogueContext()
        assert ctx.last_result is None
        assert ctx.metadata is None
        assert ctx.appointment_details == AppointmentDetails()
        assert ctx.last_utterance == ""

    def test_last_utterance_uses_first_hypothesis(self):
        ctx = DialogueContext(last_result=[
            Hypothesis(utterance="Friday", confidence=0.8),
            Hypothesis(utterance="fried egg", confidence=0.1),
        ])
        assert ctx.last_utterance == "Friday"


class TestEvents:
    def test_parse_recognised(self):
        event = parse_event({
            "type": "RECOGNISED",
            "value": [{"utterance": "vlad", "confidence": 0.93}],
        })
        assert isinstance(event, Recognised)
        assert event.utterance == "vlad"
        assert event.value[0].confidence == pytest.approx(0.93)

    def test_parse_simple_events(self):
        assert isinstance(parse_event({"type": "ASR_NOINPUT"}), AsrNoInput)
        assert isinstance(parse_event({"type": "CLICK"}), Click)

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            parse_event({"type": "HANG_UP"})

    def test_recognised_needs_a_hypothesis(self):
        with pytest.raises(ValidationError):
            Recognised(value=[])

    def test_confidence_defaults(self):
        assert Hypothesis(utterance="yes").confidence == 1.0
