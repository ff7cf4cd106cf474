"""
Pytest fixtures
"""
import pytest

from core.word_store import WordStore
from fakes import FakeSession


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def store(session):
    word_store = WordStore(session)
    word_store.bootstrap_schema()
    return word_store
