"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import List

from jobboard.logger import get_logger, reset_logger
from jobboard.models import Profile
from jobboard.events import CollectingSink


class SequenceRandom:
    """Deterministic random source replaying fixed draws."""

    def __init__(self, floats: List[float] = None, ints: List[int] = None):
        self.floats = list(floats or [])
        self.ints = list(ints or [])

    def random(self) -> float:
        return self.floats.pop(0)

    def randint(self, a: int, b: int) -> int:
        value = self.ints.pop(0)
        assert a <= value <= b
        return value


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger away from stdout and the working directory."""
    reset_logger()
    logger = get_logger(enable_console=False, log_dir=tmp_path / "logs")
    yield logger
    reset_logger()


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def valid_profile() -> Profile:
    """Profile passing every validation rule."""
    return Profile(
        name="Ada Lovelace",
        email="ada@example.com",
        phone_number="+12345678901",
        school="University of London",
    )


@pytest.fixture
def invalid_profile() -> Profile:
    """Profile missing name and school, with a malformed email."""
    return Profile(name="", email="x", phone_number="", school="")


@pytest.fixture
def temp_store_file(tmp_path, valid_profile) -> Path:
    """Create a session store holding the valid profile."""
    store_file = tmp_path / "session.json"
    store_file.write_text(json.dumps({
        "profile": valid_profile.to_dict(),
        "rewards": {"points": 90, "previous_tier_id": 0},
    }))
    return store_file


@pytest.fixture
def make_rng():
    """Factory for deterministic random sources."""
    return SequenceRandom
