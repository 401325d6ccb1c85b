"""
Logging setup for Agri Advisor.

Usage:
    from agri_advisor.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

_configured = False


def setup_logging(level: str = "INFO", log_file: str = "") -> None:
    """Configure logging once, called at startup."""
    global _configured
    if _configured:
        return

    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        datefmt=datefmt,
        handlers=handlers,
    )

    # Reduce noise from libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Standard logger, named by module."""
    return logging.getLogger(name)


__all__ = ["setup_logging", "get_logger"]
