from __future__ import annotations

import logging
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging once for the API process and the scripts."""
    level_name = (level or get_settings().log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
