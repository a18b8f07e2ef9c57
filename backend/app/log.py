"""Logging configuration using loguru.

Import `logger` from loguru everywhere. Call `setup_logging()` once at
startup (app import, CLI entry, MCP stdio entry) to configure sinks.

Console: colorized, concise format on stderr
File: data/channel-grouper.log with 10MB rotation, 3 files retained
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

from backend.app.config import settings

__all__ = ["logger", "setup_logging"]

_configured = False


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging → loguru so uvicorn/httpx/slack_sdk logs flow through."""

    def emit(self, record: logging.LogRecord) -> None:
        # Map stdlib level to loguru level name
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        # Find the caller frame that originated the log call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(*, file_sink: bool = True) -> None:
    """Configure loguru sinks. Safe to call multiple times (idempotent)."""
    global _configured
    if _configured:
        return
    _configured = True

    # Remove default stderr handler
    logger.remove()

    # Console sink: colorized, concise. Always stderr: stdout carries MCP stdio traffic.
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level:<7}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # File sink for post-mortem debugging
    if file_sink:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(settings.log_file),
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}",
            rotation="10 MB",
            retention=3,
            encoding="utf-8",
        )

    # Intercept all stdlib logging → loguru
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    # Quieten noisy third-party loggers
    for noisy in ("httpcore", "httpx", "slack_sdk", "aiohttp"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("Logging initialized | level={} | file={}", settings.log_level, settings.log_file)
