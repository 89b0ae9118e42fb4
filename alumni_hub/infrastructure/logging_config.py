from __future__ import annotations

import sys

from loguru import logger

from alumni_hub.infrastructure.config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    logger.remove()
    debug_traces = not settings.is_production
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=LOG_FORMAT,
        colorize=not settings.is_production,
        backtrace=debug_traces,
        diagnose=debug_traces,
        enqueue=False,
    )
