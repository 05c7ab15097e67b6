"""What the system says.  Summaries read from the appointment details."""

from __future__ import annotations

from dialogue.models.slots import AppointmentDetails

GREETING = "Hello world!"
CANT_HEAR = "I can't hear you!"
LETS_CREATE = "Let's create an appointment."
CREATED = "Your appointment has been created!"

# slot → (plain question, retry question)
QUESTIONS: dict[str, tuple[str, str]] = {
    "person": (
        "Who are you meeting with?",
        "I didn't catch the name. Who are you meeting with?",
    ),
    "day": (
        "On which day is your meeting?",
        "I didn't catch the day. On which day is your meeting?",
    ),
    "whole_day": (
        "Will it take the whole day?",
        "I didn't catch your answer. Will it take the whole day?",
    ),
    "time": (
        "What time is your meeting?",
        "I didn't catch the time. What time is your meeting?",
    ),
}


def question(slot: str, retry: bool) -> str:
    plain, again = QUESTIONS[slot]
    return again if retry else plain


def check_grammar(utterance: str, known: bool) -> str:
    return (
        f"You just said: {utterance}. "
        f"And it {'is' if known else 'is not'} in the grammar."
    )


def summary(details: AppointmentDetails, slot: str) -> str:
    """Echo everything gathered up to and including ``slot``."""
    text = f"You are meeting with {details.person}"
    if slot == "person":
        return text
    text += f" on {details.day}"
    if slot == "whole_day":
        if details.whole_day:
            return text + " and it will take the whole day"
        return text + " and it will not take the whole day"
    if slot == "time":
        text += f" at {details.time}"
    return text


def create_with_time(details: AppointmentDetails) -> str:
    return (
        f"Do you want me to create an appointment with {details.person} "
        f"on {details.day} at {details.time}?"
    )


def create_whole_day(details: AppointmentDetails) -> str:
    return (
        f"Do you want me to create an appointment with {details.person} "
        f"on {details.day} for the whole day?"
    )
