"""Exception hierarchy for talk thread loading and browsing."""


class TalkThreadsError(Exception):
    """Base class for all talk-threads errors."""


class LoadFailure(TalkThreadsError):
    """A topic could not be loaded."""


class ApiError(LoadFailure):
    """The DiscussionTools API request failed or reported an error."""


class PayloadError(LoadFailure):
    """The API response did not have the expected shape."""


class TopicNotFoundError(LoadFailure):
    """The requested topic id is not among the page's topics."""

    def __init__(self, topic_id: str, page_title: str) -> None:
        self.topic_id = topic_id
        self.page_title = page_title
        super().__init__(f"Topic {topic_id!r} not found on {page_title!r}")


class DuplicateItemIdError(LoadFailure):
    """Two thread items in one topic share an id."""

    def __init__(self, item_ids: list[str]) -> None:
        self.item_ids = item_ids
        super().__init__(f"Duplicate thread item ids: {item_ids!r}")


class SessionStateError(TalkThreadsError):
    """The session is not in a state that allows the operation."""
