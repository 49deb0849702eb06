"""
All service loggers hang off one ``pricematch`` namespace. The stdout handler
lives on that root only, so per-competitor children such as
``pricematch.scraper.guadalajara`` never stack handlers of their own.
"""
import logging
import sys
from typing import Optional

from pricematch.config import settings

ROOT = "pricematch"
_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    root = logging.getLogger(ROOT)
    if not any(getattr(h, "_pricematch", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        handler._pricematch = True
        root.addHandler(handler)
        root.propagate = False
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    return root


def configure_logging_once() -> None:
    if not logging.getLogger(ROOT).handlers:
        configure_logging()


def get_logger(name: str) -> logging.Logger:
    """Child of the service root; bare names like "resolver.x" are prefixed."""
    configure_logging_once()
    if name != ROOT and not name.startswith(ROOT + "."):
        name = f"{ROOT}.{name}"
    return logging.getLogger(name)
