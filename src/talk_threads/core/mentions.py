"""Collect user names linked from the visible comments of a topic."""

import html
import re
from collections.abc import Iterable, Sequence

from talk_threads.models.thread_item import ThreadItem

USER_NAMESPACES: tuple[str, ...] = ("User", "User talk")

_TITLE_ATTR = re.compile(r'title="([^"]*)"')


def _user_name(title: str, namespaces: Iterable[str]) -> str | None:
    """Return the user name if ``title`` is a page in one of the namespaces."""
    prefix, sep, rest = title.replace("_", " ").partition(":")
    if not sep or not rest.strip():
        return None
    wanted = {ns.replace("_", " ").casefold() for ns in namespaces}
    if prefix.strip().casefold() not in wanted:
        return None
    return rest.strip()


def extract_user_mentions(
    rows: Sequence[ThreadItem],
    *,
    namespaces: Iterable[str] = USER_NAMESPACES,
) -> list[str]:
    """Return user names linked from the rows' html, for mention suggestions.

    Within one item, later links come first, so the most recently mentioned
    user is suggested first. Names are de-duplicated, keeping the first
    occurrence, with underscores shown as spaces.
    """
    namespaces = tuple(namespaces)
    names: dict[str, None] = {}
    for item in rows:
        found = [
            name
            for match in _TITLE_ATTR.finditer(item.html)
            if (name := _user_name(html.unescape(match.group(1)), namespaces))
        ]
        for name in reversed(found):
            names.setdefault(name, None)
    return list(names)
