"""
Logging setup for the command-line entry points.
"""

import logging
from typing import Union

LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> int:
    """
    Configure root logging on stderr and return the numeric level in use.

    Args:
        level: A level name such as ``"INFO"`` or a numeric logging level

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")
    else:
        numeric_level = level

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    return numeric_level
