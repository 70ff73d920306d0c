"""Topic session: holds one loaded topic and keeps its flat view in sync."""

import enum
import threading
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from talk_threads.core.tree.diff import EditScript, diff
from talk_threads.core.tree.flatten import flatten
from talk_threads.core.tree.navigation import (
    check_unique_ids,
    collect_ids,
    find_item,
    find_topic,
    iter_preorder,
)
from talk_threads.errors import LoadFailure, SessionStateError, TopicNotFoundError
from talk_threads.models.thread_item import ExpandState, ThreadItem
from talk_threads.protocols import TopicsSourceProtocol


@dataclass(frozen=True)
class Empty:
    """Nothing loaded yet."""


@dataclass(frozen=True)
class Loading:
    topic_id: str


@dataclass(frozen=True)
class Loaded:
    topic: ThreadItem
    roots: tuple[ThreadItem, ...]
    flat_view: tuple[ThreadItem, ...]


@dataclass(frozen=True)
class Error:
    cause: LoadFailure


SessionState = Empty | Loading | Loaded | Error

Listener = Callable[[SessionState], None]


class ReloadPolicy(enum.Enum):
    """What happens to expand flags when a topic is loaded again."""

    PRESERVE = "preserve"  # re-match flags by id, drop ids that disappeared
    RESET = "reset"  # everything collapsed


class TopicSession:
    """Orchestrate loading one talk page topic and toggling its replies.

    The topic's replies are the roots of the displayed tree. ``toggle_expand``
    is the only mutator the presentation layer needs: it returns the edit
    script from the previous flat view to the new one.
    """

    def __init__(
        self,
        source: TopicsSourceProtocol,
        page_title: str,
        *,
        reload_policy: ReloadPolicy = ReloadPolicy.PRESERVE,
    ) -> None:
        self._source = source
        self.page_title = page_title
        self.reload_policy = reload_policy
        self.expand_state = ExpandState()

        self._state: SessionState = Empty()
        self._topic_id: str | None = None
        self._generation = 0
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def topic_id(self) -> str | None:
        return self._topic_id

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with each new state; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def load(self, topic_id: str | None = None) -> SessionState:
        """Fetch the page's topics and show the one with ``topic_id``.

        Without ``topic_id`` the current topic is reloaded. A load that is
        overtaken by a newer one is discarded when it completes.

        Returns:
            The state after the load: Loaded, Error, or whatever a newer load
            left behind.
        """
        with self._lock:
            if topic_id is None:
                if self._topic_id is None:
                    msg = "No topic to reload; pass a topic id"
                    raise SessionStateError(msg)
                topic_id = self._topic_id
            self._generation += 1
            generation = self._generation
            self._set_state(Loading(topic_id))

        logger.debug(
            "Loading topic {!r} of {!r} (request {})", topic_id, self.page_title, generation
        )
        try:
            topics = self._source.fetch_topics(self.page_title)
            topic = find_topic(topics, topic_id)
            if topic is None:
                raise TopicNotFoundError(topic_id, self.page_title)
            check_unique_ids(topic.replies)
        except LoadFailure as e:
            with self._lock:
                if generation != self._generation:
                    logger.debug("Discarding failed load {} (superseded)", generation)
                    return self._state
                logger.warning("Failed to load topic {!r}: {}", topic_id, e)
                self._set_state(Error(e))
                return self._state

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale load {} of topic {!r}", generation, topic_id)
                return self._state

            if self.reload_policy is ReloadPolicy.RESET or topic_id != self._topic_id:
                self.expand_state.clear()
            else:
                self.expand_state.retain(collect_ids(topic.replies))

            self._topic_id = topic_id
            roots = topic.replies
            flat_view = tuple(flatten(roots, self.expand_state))
            logger.debug(
                "Loaded topic {!r}: {} replies, {} visible rows",
                topic_id,
                len(roots),
                len(flat_view),
            )
            self._set_state(Loaded(topic, roots, flat_view))
            return self._state

    def _require_loaded(self) -> Loaded:
        if not isinstance(self._state, Loaded):
            msg = f"Topic session is not loaded (state: {type(self._state).__name__})"
            raise SessionStateError(msg)
        return self._state

    def current_flat_view(self) -> tuple[ThreadItem, ...]:
        """Return the visible rows, in display order."""
        return self._require_loaded().flat_view

    def toggle_expand(self, item_id: str) -> EditScript:
        """Flip an item's expand flag and return the resulting row edits.

        An id that is not in the tree is ignored and gives an empty script.
        """
        with self._lock:
            loaded = self._require_loaded()
            if find_item(loaded.roots, item_id) is None:
                logger.debug("Ignoring toggle of unknown item {!r}", item_id)
                return EditScript()

            expanded = self.expand_state.toggle(item_id)
            logger.debug("{} item {!r}", "Expanded" if expanded else "Collapsed", item_id)
            return self._refresh(loaded)

    def expand(self, item_id: str) -> EditScript:
        """Open an item's replies (no-op if already open or unknown).

        The flag is set even when the item is hidden under a collapsed
        ancestor; the script is then empty.
        """
        with self._lock:
            loaded = self._require_loaded()
            if find_item(loaded.roots, item_id) is None:
                logger.debug("Ignoring expand of unknown item {!r}", item_id)
                return EditScript()
            self.expand_state.expand(item_id)
            return self._refresh(loaded)

    def expand_all(self) -> EditScript:
        """Expand every item that has replies."""
        with self._lock:
            loaded = self._require_loaded()
            for item in iter_preorder(loaded.roots):
                if item.replies:
                    self.expand_state.expand(item.id)
            return self._refresh(loaded)

    def collapse_all(self) -> EditScript:
        with self._lock:
            loaded = self._require_loaded()
            self.expand_state.clear()
            return self._refresh(loaded)

    def _refresh(self, loaded: Loaded) -> EditScript:
        """Re-flatten, store the new view, and diff it against the old one."""
        new_view = tuple(flatten(loaded.roots, self.expand_state))
        script = diff(loaded.flat_view, new_view)
        # Same state kind, new view: no listener notification.
        self._state = Loaded(loaded.topic, loaded.roots, new_view)
        return script
