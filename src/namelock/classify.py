"""Recognition of title-change notifications.

The gateway's notification taxonomy is neither documented nor stable, so
recognition is a string heuristic over ``logMessageType``. Unknown labels
are treated as "not a title change"; the poll watcher covers anything this
misses.
"""

from __future__ import annotations

from typing import Any

from namelock.models.notification import Notification

#: Exact labels observed for thread renames across gateway variants.
KNOWN_TITLE_LABELS: frozenset[str] = frozenset(
    {
        "log:thread-name",
        "log:thread-title",
        "log:thread-name-change",
    }
)

_EVENT_TYPE = "event"


def looks_like_title_change(label: Any) -> bool:
    """Return ``True`` when *label* looks like a thread rename."""
    text = str(label)
    if text in KNOWN_TITLE_LABELS:
        return True
    if "thread" not in text:
        return False
    return "name" in text or "title" in text


def is_title_change(notification: Notification) -> bool:
    """Whether *notification* is an ``event`` carrying a rename-like label."""
    if notification.type != _EVENT_TYPE:
        return False
    label = notification.log_message_type
    if label is None or label == "":
        return False
    return looks_like_title_change(label)


def extract_thread_id(notification: Notification) -> str | None:
    """Find the affected thread id.

    Tries ``threadID`` on the item, then ``threadID`` and ``threadId`` under
    ``logMessageData``.
    """
    if notification.thread_id:
        return notification.thread_id
    data = notification.log_message_data or {}
    for key in ("threadID", "threadId"):
        value = data.get(key)
        if value:
            return str(value)
    return None
