"""Protocols for dependency injection in the topic session."""

from typing import Protocol, runtime_checkable

from talk_threads.models.thread_item import ThreadItem


@runtime_checkable
class TopicsSourceProtocol(Protocol):
    """Protocol for anything that can fetch the topics of a talk page."""

    def fetch_topics(self, page_title: str) -> list[ThreadItem]:
        """Return the top-level topics of a page, raising LoadFailure on error."""
        ...
