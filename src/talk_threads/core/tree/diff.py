"""Row-level edit scripts between two flattened thread views.

Rows are matched by item id, never by position or object identity: positions
shift whenever a subtree above a row is expanded or collapsed. The payload of a
given id never changes while a tree is loaded, so matched rows are never
reported as changed, only kept (or moved, as a remove plus an insert).
"""

from bisect import bisect_left
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import ClassVar

from talk_threads.models.thread_item import ThreadItem


@dataclass(frozen=True)
class Insert:
    """Insert ``item`` so that it ends up at ``position``."""

    position: int
    item: ThreadItem
    kind: ClassVar[str] = "insert"


@dataclass(frozen=True)
class Remove:
    """Remove the row at ``position``, which holds ``item``."""

    position: int
    item: ThreadItem
    kind: ClassVar[str] = "remove"


Operation = Insert | Remove


@dataclass(frozen=True)
class EditScript:
    """Ordered operations turning one flat view into another.

    All removes come first, in descending position, then all inserts in
    ascending position. Applied in this order to the previous view, every
    remove position is the row's index in the previous view and every insert
    position is the row's index in the current view.
    """

    operations: tuple[Operation, ...] = ()

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __bool__(self) -> bool:
        return bool(self.operations)

    @property
    def inserts(self) -> tuple[Insert, ...]:
        return tuple(op for op in self.operations if isinstance(op, Insert))

    @property
    def removes(self) -> tuple[Remove, ...]:
        return tuple(op for op in self.operations if isinstance(op, Remove))

    def apply(self, previous: Sequence[ThreadItem]) -> list[ThreadItem]:
        """Return a new list with the operations applied to ``previous``.

        Raises:
            ValueError: If a remove does not find its item at its position,
                i.e. the script was computed against a different view.
        """
        rows = list(previous)
        for op in self.operations:
            if isinstance(op, Remove):
                if op.position >= len(rows) or rows[op.position].id != op.item.id:
                    msg = f"Cannot remove {op.item.id!r} at position {op.position}"
                    raise ValueError(msg)
                del rows[op.position]
            else:
                rows.insert(op.position, op.item)
        return rows

    def runs(self) -> list[tuple[str, int, int]]:
        """Coalesce operations into ``(kind, start, count)`` batches.

        Suited to list widgets that take range notifications: a single
        expand gives one insert run, a single collapse one remove run.
        """
        batches: list[tuple[str, int, int]] = []
        for op in self.operations:
            if batches:
                kind, start, count = batches[-1]
                if kind == op.kind == "remove" and op.position == start - 1:
                    batches[-1] = (kind, op.position, count + 1)
                    continue
                if kind == op.kind == "insert" and op.position == start + count:
                    batches[-1] = (kind, start, count + 1)
                    continue
            batches.append((op.kind, op.position, 1))
        return batches

    def touched_range(self) -> tuple[int, int] | None:
        """Return the ``(start, stop)`` span of positions touched, or None if empty."""
        if not self.operations:
            return None
        positions = [op.position for op in self.operations]
        return min(positions), max(positions) + 1


def diff(previous: Sequence[ThreadItem], current: Sequence[ThreadItem]) -> EditScript:
    """Compute the edit script turning ``previous`` into ``current``.

    Rows present in both views keep their place when their relative order is
    unchanged. The kept set is the longest run of shared rows whose old
    positions increase in current order; every other shared row is moved.

    Both sequences must have unique ids.
    """
    old_positions = {item.id: i for i, item in enumerate(previous)}
    shared = [old_positions[item.id] for item in current if item.id in old_positions]
    kept = {previous[i].id for i in _longest_increasing(shared)}

    removes = [
        Remove(i, item)
        for i, item in reversed(list(enumerate(previous)))
        if item.id not in kept
    ]
    inserts = [Insert(j, item) for j, item in enumerate(current) if item.id not in kept]
    return EditScript(tuple(removes) + tuple(inserts))


def _longest_increasing(values: list[int]) -> list[int]:
    """Longest strictly increasing subsequence of distinct ints (patience sort)."""
    tail_indexes: list[int] = []
    tail_values: list[int] = []
    predecessors = [-1] * len(values)

    for i, value in enumerate(values):
        k = bisect_left(tail_values, value)
        if k:
            predecessors[i] = tail_indexes[k - 1]
        if k == len(tail_values):
            tail_indexes.append(i)
            tail_values.append(value)
        else:
            tail_indexes[k] = i
            tail_values[k] = value

    result: list[int] = []
    i = tail_indexes[-1] if tail_indexes else -1
    while i >= 0:
        result.append(values[i])
        i = predecessors[i]
    return result[::-1]
