import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_ladder_logger():
    """CLIs call setup_logging, which stops propagation; undo it per test."""
    logger = logging.getLogger("ladder")
    handlers = list(logger.handlers)
    propagate = logger.propagate
    level = logger.level
    logger.handlers.clear()
    logger.propagate = True
    yield
    logger.handlers[:] = handlers
    logger.propagate = propagate
    logger.setLevel(level)
