"""Hierarchical dialogue state machine as a pure transition function.

States are dotted paths ("Appointment.AskDay").  An event is first offered
to the leaf state's handlers, then to its phase's handlers.  Each handler is
an ordered list of guarded branches and the first branch whose guard passes
wins.  A branch runs its actions, then the entry actions of its target.
Actions mutate a private copy of the context and append transport commands,
strictly in the order they are listed.

Typical use::

    step = initial_state()
    # → step.commands == [Prepare()]
    step = transition(step.state, AsrTtsReady(), step.context)
    # → step.state is State.WAIT_TO_START
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from dialogue import prompts
from dialogue.grammar.table import DEFAULT_GRAMMAR, Grammar
from dialogue.models.events import Command, DMEvent, Listen, Prepare, Speak
from dialogue.models.slots import AppointmentDetails, DialogueContext


class State(str, Enum):
    PREPARE = "Prepare"
    WAIT_TO_START = "WaitToStart"

    GREETING_PROMPT = "Greeting.Prompt"
    GREETING_NO_INPUT = "Greeting.NoInput"
    GREETING_ASK = "Greeting.Ask"

    CHECK_GRAMMAR = "CheckGrammar"

    APPOINTMENT_PROMPT = "Appointment.Prompt"
    APPOINTMENT_NO_INPUT = "Appointment.NoInput"
    PROMPT_PERSON = "Appointment.PromptPerson"
    ASK_PERSON = "Appointment.AskPerson"
    PERSON_IDENTIFIED = "Appointment.PersonIdentified"
    PROMPT_DAY = "Appointment.PromptDay"
    ASK_DAY = "Appointment.AskDay"
    DAY_IDENTIFIED = "Appointment.DayIdentified"
    PROMPT_WHOLE_DAY = "Appointment.PromptWholeDay"
    ASK_WHOLE_DAY = "Appointment.AskWholeDay"
    WHOLE_DAY_IDENTIFIED = "Appointment.WholeDayIdentified"
    PROMPT_TIME = "Appointment.PromptTime"
    ASK_TIME = "Appointment.AskTime"
    TIME_IDENTIFIED = "Appointment.TimeIdentified"
    PROMPT_CREATE_WITH_TIME = "Appointment.PromptCreateAppointmentWithTime"
    PROMPT_CREATE_WHOLE_DAY = "Appointment.PromptCreateAppointmentWholeDay"
    CONFIRMATION = "Appointment.Confirmation"
    APPOINTMENT_DONE = "Appointment.Done"

    DONE = "Done"

    @property
    def phase(self) -> str:
        return self.value.split(".", 1)[0]


@dataclass
class Scope:
    """What actions and guards get to see during one transition."""

    context: DialogueContext
    event: Optional[DMEvent]
    grammar: Grammar
    commands: list[Command] = field(default_factory=list)


Guard = Callable[[DialogueContext], bool]
Action = Callable[[Scope], None]


@dataclass(frozen=True)
class Branch:
    target: Optional[State] = None  # None: stay, run actions only
    guard: Optional[Guard] = None
    actions: tuple[Action, ...] = ()


@dataclass
class Transition:
    """Result of feeding one event to the machine."""

    state: State
    commands: list[Command]
    context: DialogueContext
    handled: bool = True


# ── Actions ──────────────────────────────────────────────────────

def _prepare(s: Scope) -> None:
    s.commands.append(Prepare())


def _listen(s: Scope) -> None:
    s.commands.append(Listen())


def _speak(utterance: Union[str, Callable[[Scope], str]]) -> Action:
    def action(s: Scope) -> None:
        text = utterance(s) if callable(utterance) else utterance
        s.commands.append(Speak(utterance=text))
    return action


def _recognised(s: Scope) -> None:
    hypotheses = s.event.value
    s.context.last_result = list(hypotheses)
    s.context.metadata = s.grammar.lookup(s.event.utterance)


def _clear_data(s: Scope) -> None:
    s.context.last_result = None
    s.context.metadata = None


def _reset_details(s: Scope) -> None:
    s.context.appointment_details = AppointmentDetails()


def _fill(slot: str, source: str) -> Action:
    def action(s: Scope) -> None:
        setattr(s.context.appointment_details, slot, getattr(s.context.metadata, source))
    return action


def _ask(slot: str) -> Action:
    return _speak(lambda s: prompts.question(slot, retry=s.context.last_result is not None))


def _summarize(slot: str) -> Action:
    return _speak(lambda s: prompts.summary(s.context.appointment_details, slot))


def _check_grammar_sentence(s: Scope) -> str:
    utterance = s.context.last_utterance
    return prompts.check_grammar(utterance, s.grammar.is_known(utterance))


# ── Guards ───────────────────────────────────────────────────────

def is_appointment(ctx: DialogueContext) -> bool:
    text = ctx.last_utterance.lower()
    return "appointment" in text or (
        ctx.metadata is not None and ctx.metadata.type == "appointment"
    )


def _has_result(ctx: DialogueContext) -> bool:
    return ctx.last_result is not None


def _identified(source: str) -> Guard:
    if source == "value":
        return lambda ctx: ctx.metadata is not None and ctx.metadata.value is not None
    return lambda ctx: ctx.metadata is not None and bool(getattr(ctx.metadata, source))


def _missing(slot: str) -> Guard:
    return lambda ctx: ctx.appointment_details.missing_slot() == slot


def _is_whole_day(ctx: DialogueContext) -> bool:
    # Reads the stored details, not the fresh answer.
    return ctx.appointment_details.whole_day is True


def _confirmed(ctx: DialogueContext) -> bool:
    return ctx.metadata is not None and ctx.metadata.value is True


def _denied(ctx: DialogueContext) -> bool:
    return ctx.metadata is not None and ctx.metadata.value is False


# ── State table ──────────────────────────────────────────────────

_ENTRY: dict[State, tuple[Action, ...]] = {
    State.PREPARE: (_prepare,),
    State.GREETING_PROMPT: (_speak(prompts.GREETING),),
    State.GREETING_NO_INPUT: (_speak(prompts.CANT_HEAR),),
    State.GREETING_ASK: (_listen,),
    State.CHECK_GRAMMAR: (_speak(_check_grammar_sentence),),
    State.APPOINTMENT_PROMPT: (_speak(prompts.LETS_CREATE), _clear_data, _reset_details),
    State.APPOINTMENT_NO_INPUT: (_speak(prompts.CANT_HEAR),),
    State.PROMPT_CREATE_WITH_TIME: (
        _speak(lambda s: prompts.create_with_time(s.context.appointment_details)),
    ),
    State.PROMPT_CREATE_WHOLE_DAY: (
        _speak(lambda s: prompts.create_whole_day(s.context.appointment_details)),
    ),
    State.CONFIRMATION: (_listen, _clear_data),
    State.APPOINTMENT_DONE: (_speak(prompts.CREATED),),
}

_LEAF_ON: dict[State, dict[str, list[Branch]]] = {
    State.PREPARE: {"ASRTTS_READY": [Branch(State.WAIT_TO_START)]},
    State.WAIT_TO_START: {"CLICK": [Branch(State.GREETING_PROMPT)]},
    State.GREETING_PROMPT: {"SPEAK_COMPLETE": [Branch(State.GREETING_ASK)]},
    State.GREETING_NO_INPUT: {
        "SPEAK_COMPLETE": [Branch(State.GREETING_ASK)],
        # the listen that timed out may still report completion
        "LISTEN_COMPLETE": [Branch()],
    },
    State.GREETING_ASK: {
        "RECOGNISED": [Branch(actions=(_recognised,))],
        "ASR_NOINPUT": [Branch(State.GREETING_NO_INPUT, actions=(_clear_data,))],
    },
    State.CHECK_GRAMMAR: {"SPEAK_COMPLETE": [Branch(State.DONE)]},
    State.APPOINTMENT_PROMPT: {"SPEAK_COMPLETE": [Branch(State.PROMPT_PERSON)]},
    State.APPOINTMENT_NO_INPUT: {
        "SPEAK_COMPLETE": [
            Branch(State.PROMPT_PERSON, _missing("person")),
            Branch(State.PROMPT_DAY, _missing("day")),
            Branch(State.PROMPT_WHOLE_DAY, _missing("whole_day")),
            Branch(State.PROMPT_TIME, _missing("time")),
            Branch(State.APPOINTMENT_PROMPT),
        ],
        "LISTEN_COMPLETE": [Branch()],
    },
    State.PERSON_IDENTIFIED: {"SPEAK_COMPLETE": [Branch(State.PROMPT_DAY)]},
    State.DAY_IDENTIFIED: {"SPEAK_COMPLETE": [Branch(State.PROMPT_WHOLE_DAY)]},
    State.WHOLE_DAY_IDENTIFIED: {
        "SPEAK_COMPLETE": [
            Branch(State.PROMPT_CREATE_WHOLE_DAY, _is_whole_day),
            Branch(State.PROMPT_TIME),
        ],
    },
    State.TIME_IDENTIFIED: {"SPEAK_COMPLETE": [Branch(State.PROMPT_CREATE_WITH_TIME)]},
    State.PROMPT_CREATE_WITH_TIME: {"SPEAK_COMPLETE": [Branch(State.CONFIRMATION)]},
    State.PROMPT_CREATE_WHOLE_DAY: {"SPEAK_COMPLETE": [Branch(State.CONFIRMATION)]},
    State.CONFIRMATION: {
        "LISTEN_COMPLETE": [
            Branch(State.APPOINTMENT_DONE, _confirmed),
            Branch(State.APPOINTMENT_PROMPT, _denied),
            Branch(State.PROMPT_CREATE_WHOLE_DAY, _is_whole_day),
            Branch(State.PROMPT_CREATE_WITH_TIME),
        ],
    },
    State.APPOINTMENT_DONE: {"SPEAK_COMPLETE": [Branch(State.DONE)]},
    State.DONE: {"CLICK": [Branch(State.GREETING_PROMPT)]},
}

# slot, SlotRecord field, Prompt, Ask, Identified
_SLOTS = [
    ("person", "person", State.PROMPT_PERSON, State.ASK_PERSON, State.PERSON_IDENTIFIED),
    ("day", "day", State.PROMPT_DAY, State.ASK_DAY, State.DAY_IDENTIFIED),
    ("whole_day", "value", State.PROMPT_WHOLE_DAY, State.ASK_WHOLE_DAY, State.WHOLE_DAY_IDENTIFIED),
    ("time", "time", State.PROMPT_TIME, State.ASK_TIME, State.TIME_IDENTIFIED),
]

for _slot, _source, _prompt, _ask_state, _identified_state in _SLOTS:
    _ENTRY[_prompt] = (_ask(_slot),)
    _ENTRY[_ask_state] = (_listen,)
    # details first: the summary reads the value just stored
    _ENTRY[_identified_state] = (_fill(_slot, _source), _summarize(_slot), _clear_data)
    _LEAF_ON[_prompt] = {"SPEAK_COMPLETE": [Branch(_ask_state)]}
    _LEAF_ON[_ask_state] = {
        "LISTEN_COMPLETE": [
            Branch(_identified_state, _identified(_source)),
            Branch(_prompt),
        ],
    }

_PHASE_ON: dict[str, dict[str, list[Branch]]] = {
    "Greeting": {
        "LISTEN_COMPLETE": [
            Branch(State.APPOINTMENT_PROMPT, is_appointment),
            Branch(State.CHECK_GRAMMAR, _has_result),
            Branch(State.GREETING_NO_INPUT),
        ],
    },
    "Appointment": {
        "RECOGNISED": [Branch(actions=(_recognised,))],
        "ASR_NOINPUT": [Branch(State.APPOINTMENT_NO_INPUT, actions=(_clear_data,))],
        "LISTEN_COMPLETE": [Branch(State.APPOINTMENT_NO_INPUT)],
    },
}


def _enter(state: State, s: Scope) -> None:
    for action in _ENTRY.get(state, ()):
        action(s)


def initial_state(
    context: Optional[DialogueContext] = None,
    grammar: Grammar = DEFAULT_GRAMMAR,
) -> Transition:
    """Enter Prepare and return its commands."""
    scope = Scope(context or DialogueContext(), None, grammar)
    _enter(State.PREPARE, scope)
    return Transition(State.PREPARE, scope.commands, scope.context)


def transition(
    state: State,
    event: DMEvent,
    context: DialogueContext,
    grammar: Grammar = DEFAULT_GRAMMAR,
) -> Transition:
    """Feed one event to the machine.

    ``context`` is not modified; the returned transition carries a new one.
    Events nobody handles come back with ``handled=False`` and no commands.
    """
    candidates = [
        _LEAF_ON.get(state, {}).get(event.type, []),
        _PHASE_ON.get(state.phase, {}).get(event.type, []),
    ]
    for branches in candidates:
        for branch in branches:
            if branch.guard is not None and not branch.guard(context):
                continue
            scope = Scope(context.model_copy(deep=True), event, grammar)
            for action in branch.actions:
                action(scope)
            if branch.target is None:
                return Transition(state, scope.commands, scope.context)
            _enter(branch.target, scope)
            return Transition(branch.target, scope.commands, scope.context)

    return Transition(state, [], context, handled=False)
