"""
Console trace configuration.

Trace lines (SKIP/COPY/TEMPLATE/FROM) are plain INFO records, so the
default format is the bare message written to stdout.
"""

import logging
import sys
from typing import Optional

from .config import settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure root logging for the command line tool."""
    if level:
        level_value = getattr(logging, level.upper(), logging.INFO)
    else:
        level_value = settings.log_level_value
    logging.basicConfig(
        level=level_value,
        format=fmt or settings.log_format,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.getLogger("custodian").setLevel(level_value)
