"""Grammar table: recognized phrases mapped to partial slot values.

The interpreter is deliberately dumb: lowercase the utterance and look it up
verbatim.  It does not know whether a key names a person, a day or an hour;
callers find that out from which ``SlotRecord`` field is set.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from dialogue.models.slots import SlotRecord

_EMPTY = SlotRecord()


class Grammar:
    """Immutable phrase → ``SlotRecord`` table."""

    def __init__(self, entries: Mapping[str, SlotRecord | Mapping]) -> None:
        table: dict[str, SlotRecord] = {}
        for phrase, record in entries.items():
            if not isinstance(record, SlotRecord):
                record = SlotRecord(**record)
            if record.is_empty():
                raise ValueError(f"Grammar entry {phrase!r} has no slot values")
            table[phrase.lower()] = record
        self._entries = MappingProxyType(table)

    @staticmethod
    def normalize(utterance: str) -> str:
        return utterance.lower()

    def lookup(self, utterance: str) -> SlotRecord:
        """Interpret an utterance; unknown phrases give an empty record."""
        return self._entries.get(self.normalize(utterance), _EMPTY)

    def is_known(self, utterance: str) -> bool:
        return self.normalize(utterance) in self._entries

    @property
    def entries(self) -> Mapping[str, SlotRecord]:
        return self._entries

    def __contains__(self, utterance: object) -> bool:
        return isinstance(utterance, str) and self.is_known(utterance)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


_PERSONS = {
    "vlad": "Vladislav Maraev",
    "bora": "Bora Kara",
    "tal": "Talha Bedir",
    "tom": "Tom Södahl Bladsjö",
    "eugene": "Eugene Wong",
}

_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_AFFIRMATIVE = [
    "yes", "yeah", "yep", "yup", "sure", "of course", "absolutely",
    "that's right", "correct", "sounds good", "do it", "ja", "positive",
]

_NEGATIVE = [
    "no", "nope", "nah", "no way", "cancel", "incorrect", "wrong",
    "don't do that", "nej", "negative",
]


def _default_entries() -> dict[str, SlotRecord]:
    entries: dict[str, SlotRecord] = {}
    for key, name in _PERSONS.items():
        entries[key] = SlotRecord(person=name)
    for day in _DAYS:
        entries[day.lower()] = SlotRecord(day=day)
    for hour in range(1, 24):
        entries[str(hour)] = SlotRecord(time=f"{hour:02d}:00")
    for phrase in _AFFIRMATIVE:
        entries[phrase] = SlotRecord(value=True)
    for phrase in _NEGATIVE:
        entries[phrase] = SlotRecord(value=False)
    entries["appointment"] = SlotRecord(type="appointment")
    return entries


DEFAULT_GRAMMAR = Grammar(_default_entries())


def lookup(utterance: str) -> SlotRecord:
    return DEFAULT_GRAMMAR.lookup(utterance)


def is_known(utterance: str) -> bool:
    return DEFAULT_GRAMMAR.is_known(utterance)
