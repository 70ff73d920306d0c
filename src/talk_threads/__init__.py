"""Browse talk page discussions as collapsible, incrementally updated trees."""

from talk_threads.api import DiscussionToolsApi
from talk_threads.core.tree.diff import EditScript, Insert, Remove, diff
from talk_threads.core.tree.flatten import flatten
from talk_threads.models.thread_item import ExpandState, ThreadItem
from talk_threads.protocols import TopicsSourceProtocol
from talk_threads.session import ReloadPolicy, TopicSession

__all__ = [
    "DiscussionToolsApi",
    "EditScript",
    "ExpandState",
    "Insert",
    "ReloadPolicy",
    "Remove",
    "ThreadItem",
    "TopicSession",
    "TopicsSourceProtocol",
    "diff",
    "flatten",
]
