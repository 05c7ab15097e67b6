"""Run a dialogue in the terminal.

    python -m dialogue [--grammar grammar.jsonl] [--debug]

Press Enter to start a dialogue (the "start" button), then answer the
prompts by typing.  A blank answer counts as silence.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dialogue.config import Settings
from dialogue.debug_events import DebugBroadcaster
from dialogue.grammar import DEFAULT_GRAMMAR, load_grammar_jsonl
from dialogue.models.events import Click
from dialogue.session import DialogueSession
from dialogue.transport.console import ConsoleTransport

log = logging.getLogger("dialogue.cli")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Voice appointment dialogue, text mode")
    parser.add_argument("--grammar", help="JSONL grammar file (overrides GRAMMAR_PATH)")
    parser.add_argument("--debug", action="store_true", help="Log every event and command")
    args = parser.parse_args(argv)

    settings = Settings()
    if args.grammar:
        settings.grammar_path = args.grammar

    debug = args.debug or settings.debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )

    try:
        warnings = settings.validate_startup()
        grammar = load_grammar_jsonl(settings.grammar_path) if settings.grammar_path else DEFAULT_GRAMMAR
    except ValueError as e:
        log.error("%s", e)
        return 2
    for warning in warnings:
        log.warning(warning)

    log.info("Grammar loaded: %d phrases", len(grammar))

    transport = ConsoleTransport(settings.transport_settings())
    session = DialogueSession(transport=transport, grammar=grammar)
    if debug:
        session.attach_broadcaster(DebugBroadcaster(session.session_id))

    try:
        session.start()
        while True:
            answer = input("Press Enter to start (q to quit) ")
            if answer.strip().lower() == "q":
                break
            session.send(Click())
            log.info("Dialogue finished: %s", session.to_dict(detail=debug))
    except (EOFError, KeyboardInterrupt):
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
