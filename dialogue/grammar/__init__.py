"""Grammar table and utterance interpreter."""

from .loader import load_grammar_jsonl, save_grammar_jsonl
from .table import DEFAULT_GRAMMAR, Grammar, is_known, lookup

__all__ = [
    "DEFAULT_GRAMMAR",
    "Grammar",
    "is_known",
    "load_grammar_jsonl",
    "lookup",
    "save_grammar_jsonl",
]
