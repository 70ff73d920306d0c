"""Flatten a thread tree into the ordered list of visible rows."""

from collections.abc import Container, Sequence

from talk_threads.core.tree.navigation import iter_preorder
from talk_threads.models.thread_item import ThreadItem


def flatten(roots: Sequence[ThreadItem], expanded: Container[str]) -> list[ThreadItem]:
    """Return the items currently visible, in display order.

    Every root is visible. An item's replies follow it, recursively, if and
    only if its id is in ``expanded``; collapsed subtrees are not walked, so
    expand flags below a collapsed item are kept but have no effect.

    Args:
        roots: Top-level items of the topic.
        expanded: Ids of expanded items (an ExpandState or any set of ids).

    Returns:
        The items themselves (not copies), depth-first pre-order.
    """
    return [item for item, _depth in visible_depths(roots, expanded)]


def visible_depths(
    roots: Sequence[ThreadItem], expanded: Container[str]
) -> list[tuple[ThreadItem, int]]:
    """Like flatten(), but pair each row with its depth below the roots."""
    out: list[tuple[ThreadItem, int]] = []
    todo: list[tuple[ThreadItem, int]] = [(item, 0) for item in reversed(roots)]
    while todo:
        item, depth = todo.pop()
        out.append((item, depth))
        if item.id in expanded:
            todo.extend((reply, depth + 1) for reply in reversed(item.replies))
    return out


def flatten_all(roots: Sequence[ThreadItem]) -> list[ThreadItem]:
    """Return every item in the tree, ignoring expand state."""
    return list(iter_preorder(roots))
