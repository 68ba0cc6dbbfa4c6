"""Shared pytest fixtures"""

import logging
import random

import pytest

from teller.accounts import AccountNumberRegistry, open_account
from teller.config import reload_config


@pytest.fixture
def registry():
    """Registry with a seeded random source"""
    return AccountNumberRegistry(rng=random.Random(42))


@pytest.fixture
def account(registry):
    """Freshly opened zero-balance account"""
    return open_account("Asha Verma", "9876543210", "12 MG Road, Pune", registry)


@pytest.fixture
def configure(monkeypatch):
    """Override settings through TELLER_* environment variables"""
    def apply(**overrides):
        for key, value in overrides.items():
            monkeypatch.setenv(f"TELLER_{key.upper()}", str(value))
        return reload_config()

    yield apply
    monkeypatch.undo()
    reload_config()


@pytest.fixture(autouse=True)
def reset_teller_logging():
    """Drop handlers the CLI attaches to the teller logger"""
    yield
    logger = logging.getLogger("teller")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
