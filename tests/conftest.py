import logging
import os

import pytest

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


@pytest.fixture(autouse=True)
def _reset_cibash_logger():
    """CLI runs reconfigure the cibash logger; hand it back to caplog afterwards."""
    yield
    logger = logging.getLogger("cibash")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fixture_text():
    """Return the text of a file under tests/fixtures."""

    def _read(*parts: str) -> str:
        with open(os.path.join(FIXTURES, *parts), encoding="utf-8") as f:
            return f.read()

    return _read
