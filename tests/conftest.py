"""Shared test fixtures and configuration."""

from dataclasses import dataclass, field
import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Keep developer shells from leaking search defaults into tests
TEST_ENV = {
    "RECORD_SEARCH_MAX_RESULTS": "50",
    "RECORD_SEARCH_CASE_SENSITIVE": "false",
    "RECORD_SEARCH_INCLUDE_COLLECTIONS": "true",
    "RECORD_SEARCH_INCLUDE_NESTED": "true",
    "RECORD_SEARCH_LOG_LEVEL": "info",
    "RECORD_SEARCH_LOG_JSON": "true",
    "RECORD_SEARCH_TRACING_ENABLED": "false",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset RECORD_SEARCH_* variables before each test."""
    for key in list(os.environ):
        if key.startswith("RECORD_SEARCH_") and key not in TEST_ENV:
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@dataclass
class Address:
    city: str = ""
    lines: list[str] = field(default_factory=list)


@dataclass
class Person:
    name: str = ""
    nicknames: list[str] = field(default_factory=list)
    address: Address | None = None
    _secret: str = "hidden"
    age: int = 0


@pytest.fixture
def sample_records() -> list[dict]:
    return [
        {"title": "Hello World", "tags": ["alpha", "beta"]},
        {"title": "Goodbye", "tags": ["gamma"]},
    ]


@pytest.fixture
def person() -> Person:
    return Person(
        name="Ada Lovelace",
        nicknames=["Enchantress of Numbers", ""],
        address=Address(city="London", lines=["12 St James's Square"]),
        age=36,
    )
