# src/taskly/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the persisted snapshot),
then runs the console REPL in the main thread.
"""

from __future__ import annotations

import locale
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def init_collation() -> str | None:
    """Adopt the user's collation locale so alpha sort follows it."""
    try:
        return locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("Locale from environment is unavailable; alpha sort uses code-point order.")
        return None


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = settings.data_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    init_collation()

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        # Every mutation is already persisted; nothing to flush.
        logger.info("Bye.")


if __name__ == "__main__":
    main()
