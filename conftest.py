import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru output as 'LEVEL message' strings."""
    messages = []
    handler_id = logger.add(
        lambda message: messages.append(f"{message.record['level'].name} {message.record['message']}"),
        level="DEBUG",
    )
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass
