"""Domain models for talk page threads."""

from dataclasses import dataclass
from typing import Any

from talk_threads.errors import PayloadError

HEADING_TYPE = "heading"
COMMENT_TYPE = "comment"


@dataclass(frozen=True)
class ThreadItem:
    """A single heading or comment in a discussion thread.

    The payload is immutable. Whether a node's replies are shown lives in
    ExpandState, keyed by ``id``.
    """

    type: str = ""
    level: int = 0
    id: str = ""
    name: str = ""
    html: str = ""
    author: str = ""
    timestamp: str = ""
    heading_level: int = 0
    placeholder_heading: bool = False
    replies: tuple["ThreadItem", ...] = ()

    @property
    def is_heading(self) -> bool:
        return self.type == HEADING_TYPE

    @property
    def reply_count(self) -> int:
        return len(self.replies)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ThreadItem":
        """Build an item and its replies from a DiscussionTools payload dict.

        Absent fields fall back to empty/zero defaults.

        Raises:
            PayloadError: If the payload or one of its replies is not a mapping,
                or ``replies`` is not a list, or a level is not a number.
        """
        if not isinstance(data, dict):
            msg = f"Thread item must be an object, got {type(data).__name__}"
            raise PayloadError(msg)

        raw_replies = data.get("replies") or []
        if not isinstance(raw_replies, list):
            msg = f"Replies of {data.get('id')!r} must be a list, got {type(raw_replies).__name__}"
            raise PayloadError(msg)

        item_id = data.get("id") or ""
        try:
            level = int(data.get("level") or 0)
            heading_level = int(data.get("headingLevel") or 0)
        except (TypeError, ValueError) as e:
            msg = f"Bad level in thread item {item_id!r}: {e}"
            raise PayloadError(msg) from e

        return cls(
            type=data.get("type") or "",
            level=level,
            id=item_id,
            name=data.get("name") or "",
            html=data.get("html") or "",
            author=data.get("author") or "",
            timestamp=data.get("timestamp") or "",
            heading_level=heading_level,
            placeholder_heading=bool(data.get("placeholderHeading", False)),
            replies=tuple(cls.from_dict(r) for r in raw_replies),
        )


class ExpandState:
    """Id-keyed expand/collapse flags for the items of one topic.

    Items are collapsed unless their id has been expanded.
    """

    def __init__(self, expanded: set[str] | None = None) -> None:
        self._expanded: set[str] = set(expanded or ())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def __repr__(self) -> str:
        return f"ExpandState({sorted(self._expanded)!r})"

    def is_expanded(self, item_id: str) -> bool:
        return item_id in self._expanded

    def expand(self, item_id: str) -> None:
        self._expanded.add(item_id)

    def collapse(self, item_id: str) -> None:
        self._expanded.discard(item_id)

    def toggle(self, item_id: str) -> bool:
        """Flip an item's flag and return the new value."""
        if item_id in self._expanded:
            self._expanded.remove(item_id)
            return False
        self._expanded.add(item_id)
        return True

    def clear(self) -> None:
        self._expanded.clear()

    def retain(self, item_ids: set[str]) -> None:
        """Drop flags for ids not in ``item_ids``."""
        self._expanded &= item_ids

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._expanded)
