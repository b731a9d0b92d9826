import os

import pytest
from fastapi.testclient import TestClient

from leitner.application.bucket_store import BucketStore
from leitner.application.practice_service import PracticeService
from leitner.domain.models import Flashcard


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep the developer's env vars and config files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LEITNER_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr("leitner.application.config.CONFIG_FILES", [])


@pytest.fixture
def capital():
    return Flashcard("What is the capital of France?", "Paris", hint="Eiffel Tower city")


@pytest.fixture
def water():
    return Flashcard("What is the chemical symbol for water?", "H2O", tags={"science"})


@pytest.fixture
def prime():
    return Flashcard("What is the smallest prime number?", "2")


@pytest.fixture
def cards(capital, water, prime):
    return [capital, water, prime]


@pytest.fixture
def service(cards):
    return PracticeService(cards, clock=lambda: 1_700_000_000_000)


@pytest.fixture
def make_service(cards):
    """Build a service whose store starts from a given bucket layout."""

    def _make(buckets, day=0, **kwargs):
        store = BucketStore(buckets, day=day)
        return PracticeService(cards, store=store, clock=lambda: 1_700_000_000_000, **kwargs)

    return _make


@pytest.fixture
def client(service):
    from leitner.server import create_app

    return TestClient(create_app(service=service))
