from __future__ import annotations

import logging
import typing as T


def get_app_name() -> str:
    return __name__.split(".", 1)[0]


def configure_logger(
    logger: logging.Logger, level: int, stream: T.TextIO | None = None
) -> None:
    """Configure the given logger."""
    formatter = logging.Formatter("%(asctime)s - %(levelname)-6s - %(message)s")
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)


def log_exception(logger: logging.Logger, ex: Exception) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        exc_info = ex
    else:
        exc_info = None

    logger.error(f"{ex.__class__.__name__}: {ex}", exc_info=exc_info)
