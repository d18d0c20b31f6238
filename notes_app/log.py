"""
Notes — Logging Configuration
===============================

What:  Configures the standard library root logger once per process.
Who:   The API service lifespan and the `notes` command-line client.

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx")


def setup_logging(level: str = "INFO", stream=None) -> None:
    """
    Configure logging for the whole process.

    Args:
        level:  Logging level name (already validated by the settings classes).
        stream: Destination stream; stdout for the server, stderr for the CLI
                so command output stays clean.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stdout)],
        force=True,
    )

    # Per-query and per-connection chatter from third-party libraries
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
