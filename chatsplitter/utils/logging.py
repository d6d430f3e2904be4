"""Logging configuration for chatsplitter."""

from __future__ import annotations

import logging
import sys

_HANDLER_NAME = "chatsplitter-cli"


def setup_logging(verbose: bool = False) -> None:
    """Configure the package logger for command-line use.

    Calling it again replaces the earlier handler instead of stacking a
    second one, so repeated CLI invocations in one process log once.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    package_logger = logging.getLogger("chatsplitter")
    for existing in list(package_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(existing)
    package_logger.setLevel(level)
    package_logger.addHandler(handler)

    # Quiet transport and tokenizer libraries, even in verbose mode
    for name in ("httpx", "openai", "tiktoken"):
        logging.getLogger(name).setLevel(logging.WARNING)
