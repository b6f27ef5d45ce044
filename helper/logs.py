# helper/logs.py
from __future__ import annotations

import logging
import sys

from os_env import LOG_LEVEL

LOG_FORMAT = '[%(name)s] %(levelname)s %(message)s'


def init_logging(level: str = LOG_LEVEL) -> None:
    """
    Configures the root logger once for the server and the CLI.
    Everything goes to stderr so stdout stays clean for JSON output.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
