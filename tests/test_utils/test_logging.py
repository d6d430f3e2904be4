"""Tests for setup_logging."""

import logging

from chatsplitter.utils.logging import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        logger = logging.getLogger("chatsplitter")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging()
        setup_logging(verbose=True)
        handlers = logging.getLogger("chatsplitter").handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG

    def test_libraries_are_quieted(self):
        setup_logging(verbose=True)
        for name in ("httpx", "openai", "tiktoken"):
            assert logging.getLogger(name).level == logging.WARNING
