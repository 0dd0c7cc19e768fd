"""
Centralized logging.

Stdlib logging, configured in one place for the whole app. Modules import
`logger` from here rather than calling `logging.getLogger` themselves.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from vinped.core.settings import settings


@lru_cache
def initialize_logger() -> logging.Logger:
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=settings.LOG_LEVEL.upper(),
    )
    return logging.getLogger("vinped")


logger = initialize_logger()
