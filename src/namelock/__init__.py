"""namelock - keep a group thread's title locked to a fixed name."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("namelock")
except PackageNotFoundError:
    __version__ = "0+local"
from namelock.appstate import load_appstate
from namelock.classify import extract_thread_id, is_title_change, looks_like_title_change
from namelock.client import ThreadClient
from namelock.clock import AsyncioClock, Clock
from namelock.config import LockConfig
from namelock.corrector import CorrectionOutcome, Corrector
from namelock.event_watcher import EventWatcher
from namelock.exceptions import (
    ApiError,
    AppStateError,
    AuthenticationError,
    ConfigError,
    NameLockError,
    NotificationStreamError,
    TransportError,
)
from namelock.models import UNKNOWN_NAME, AppStateCookie, Notification, ThreadInfo
from namelock.poll_watcher import PollState, PollWatcher

__all__ = [
    "__version__",
    "UNKNOWN_NAME",
    "ApiError",
    "AppStateCookie",
    "AppStateError",
    "AsyncioClock",
    "AuthenticationError",
    "Clock",
    "ConfigError",
    "CorrectionOutcome",
    "Corrector",
    "EventWatcher",
    "LockConfig",
    "NameLockError",
    "Notification",
    "NotificationStreamError",
    "PollState",
    "PollWatcher",
    "ThreadClient",
    "ThreadInfo",
    "TransportError",
    "extract_thread_id",
    "is_title_change",
    "load_appstate",
    "looks_like_title_change",
]
