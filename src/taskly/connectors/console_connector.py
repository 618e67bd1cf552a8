# src/taskly/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

_PROMPT = "taskly> "


def _emit(text: str) -> None:
    # Immediate user-visible feedback for multi-step commands (e.g. /import)
    print(text, flush=True)


def handle_line(state: AppState, line: str) -> str | None:
    """
    One REPL step. Plain text (no leading slash) is shorthand for /add.

    Returns the reply to print, or None for an empty line.
    """
    line = line.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = "/add " + line

    try:
        return command_registry.handle(state, line, emit=_emit)
    except Exception:
        logger.exception("Command handler crashed: %r", line)
        return "Internal error while handling a command."


def run_console_loop(state: AppState, *, read: Callable[[str], str] = input) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store))
    app_name = str(getattr(state.settings, "app_name", "taskly"))
    print(f"[{app_name}] Type a task to add it. Use /help for commands, /exit to quit.\n")

    reply = handle_line(state, "/list")
    if reply:
        print(reply)

    while True:
        try:
            user_input = read(_PROMPT)
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.strip().lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")
