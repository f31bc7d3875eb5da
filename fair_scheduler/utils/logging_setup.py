"""Logging configuration shared by the CLI commands"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_from_name(level: str) -> int:
    """Numeric logging level for a name such as "INFO"."""
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Invalid log level: {level}")
    return numeric_level


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Route package logs to stderr and, optionally, to a file."""
    numeric_level = level_from_name(level)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)
