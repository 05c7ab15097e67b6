"""Load JSONL grammar files into Grammar objects.

Each non-empty line is one entry::

    {"phrase": "vlad", "person": "Vladislav Maraev"}
    {"phrase": "14", "time": "14:00"}
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from dialogue.grammar.table import Grammar
from dialogue.models.slots import SlotRecord


def load_grammar_jsonl(path: str | Path) -> Grammar:
    """Load a grammar from a JSONL file, one phrase per line."""
    path = Path(path)
    entries: dict[str, SlotRecord] = {}

    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e
        if not isinstance(data, dict):
            raise ValueError(f"{path}:{lineno}: expected a JSON object")

        phrase = data.pop("phrase", None)
        if not isinstance(phrase, str) or not phrase:
            raise ValueError(f"{path}:{lineno}: missing 'phrase'")
        try:
            record = SlotRecord(**data)
        except ValidationError as e:
            raise ValueError(f"{path}:{lineno}: bad slot values: {e}") from e
        if record.is_empty():
            raise ValueError(f"{path}:{lineno}: no slot values for {phrase!r}")
        entries[phrase] = record

    if not entries:
        raise ValueError(f"No grammar entries found in {path}")
    return Grammar(entries)


def save_grammar_jsonl(grammar: Grammar, path: str | Path) -> None:
    """Persist a grammar to a JSONL file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        json.dumps({"phrase": phrase, **record.model_dump(exclude_none=True)}, ensure_ascii=False)
        for phrase, record in grammar.entries.items()
    ]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
