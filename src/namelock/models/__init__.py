"""Typed models for gateway payloads."""

from namelock.models.appstate import AppStateCookie
from namelock.models.notification import Notification
from namelock.models.thread import UNKNOWN_NAME, ThreadInfo

__all__ = [
    "UNKNOWN_NAME",
    "AppStateCookie",
    "Notification",
    "ThreadInfo",
]
