"""Tree navigation: pre-order traversal, lookup by id, id checks."""

from collections import Counter
from collections.abc import Iterator, Sequence

from talk_threads.errors import DuplicateItemIdError
from talk_threads.models.thread_item import ThreadItem


def iter_preorder(roots: Sequence[ThreadItem]) -> Iterator[ThreadItem]:
    """Yield every item depth-first, parents before their replies."""
    todo: list[ThreadItem] = list(reversed(roots))
    while todo:
        item = todo.pop()
        yield item
        todo.extend(reversed(item.replies))


def find_item(roots: Sequence[ThreadItem], item_id: str) -> ThreadItem | None:
    """Return the item with the given id, or None if it is not in the tree."""
    return next((item for item in iter_preorder(roots) if item.id == item_id), None)


def find_topic(topics: Sequence[ThreadItem], topic_id: str) -> ThreadItem | None:
    """Return the top-level topic with the given id (replies are not searched)."""
    return next((topic for topic in topics if topic.id == topic_id), None)


def collect_ids(roots: Sequence[ThreadItem]) -> set[str]:
    return {item.id for item in iter_preorder(roots)}


def check_unique_ids(roots: Sequence[ThreadItem]) -> None:
    """Raise DuplicateItemIdError if any id occurs more than once in the tree."""
    counts = Counter(item.id for item in iter_preorder(roots))
    duplicates = sorted(item_id for item_id, n in counts.items() if n > 1)
    if duplicates:
        raise DuplicateItemIdError(duplicates)
