# src/todo_assistant/cli/main.py

"""
CLI entrypoint.

Initializes logging, validates configuration, builds AppState and the chat
session, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, create_session
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import ConfigError, StoreError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)

EXIT_STARTUP = 2


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (log file %s)...", settings.app_name, log_file)

    try:
        state = create_initial_state(settings=settings)
    except (ConfigError, StoreError) as e:
        logger.error("Startup failed: %s", e)
        print(f"Startup failed: {e}", file=sys.stderr)
        return EXIT_STARTUP

    session = create_session(state)
    try:
        code = run_console_loop(state, session)
    finally:
        session.close()
        logger.info("Bye.")
    return code


if __name__ == "__main__":
    sys.exit(main())
