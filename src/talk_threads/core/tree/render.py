"""Render a flattened thread view as indented plain text."""

import html
import io
import re
from collections.abc import Container, Sequence

from talk_threads.core.tree.flatten import visible_depths
from talk_threads.models.thread_item import ThreadItem

_TAG = re.compile(r"<[^>]+>")
_SPACE = re.compile(r"\s+")


def plain_text(fragment: str) -> str:
    """Strip tags and collapse whitespace (display only, not a parser)."""
    return _SPACE.sub(" ", html.unescape(_TAG.sub(" ", fragment))).strip()


def render_thread_as_text(
    roots: Sequence[ThreadItem],
    expanded: Container[str],
    *,
    max_width: int | None = 100,
) -> str:
    """Render the visible rows, one per line, indented by reply depth.

    Rows with replies get a marker: ``[+N]`` when collapsed (N hidden direct
    replies), ``[-]`` when expanded.

    Args:
        roots: Top-level items of the topic.
        expanded: Ids of expanded items.
        max_width: Truncate the text part of each row to this many characters
            (None = no limit).

    Returns:
        Text with one line per visible row.
    """
    out = io.StringIO()
    for item, depth in visible_depths(roots, expanded):
        indent = "    " * depth
        marker = ""
        if item.replies:
            marker = "[-] " if item.id in expanded else f"[+{item.reply_count}] "

        text = plain_text(item.html) or "(no text)"
        if max_width is not None and len(text) > max_width:
            text = text[: max_width - 1] + "…"

        byline = f" -- {item.author}" if item.author else ""
        if item.timestamp:
            byline += f", {item.timestamp}"
        out.write(f"{indent}- {marker}{text}{byline}  (id={item.id})\n")
    return out.getvalue()
