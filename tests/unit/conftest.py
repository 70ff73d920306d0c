"""Shared test fixtures."""

import pytest

from talk_threads.session import TopicSession
from tests.unit.fakes import PAGE, FakeTopicsSource, make_topic_tree


@pytest.fixture
def source() -> FakeTopicsSource:
    fake = FakeTopicsSource()
    fake.add_page(PAGE, make_topic_tree())
    return fake


@pytest.fixture
def session(source: FakeTopicsSource) -> TopicSession:
    """A session with topic h1 loaded."""
    s = TopicSession(source, PAGE)
    s.load("h1")
    return s
