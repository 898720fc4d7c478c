"""Pytest configuration for glyphscramble tests."""

from typing import Iterator, List

import pytest
from loguru import logger

logger.remove()


@pytest.fixture
def log_messages() -> Iterator[List[str]]:
    """Capture glyphscramble log messages at WARNING and above."""
    messages: List[str] = []
    logger.enable("glyphscramble")
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
        logger.disable("glyphscramble")


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
