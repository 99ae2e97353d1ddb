from __future__ import annotations

import pytest

from namelock.models import UNKNOWN_NAME, Notification, ThreadInfo


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"name": "Primary", "threadName": "Secondary"}, "Primary"),
        ({"name": "", "threadName": "Secondary"}, "Secondary"),
        ({"threadName": "Secondary"}, "Secondary"),
        ({"name": None}, UNKNOWN_NAME),
        ({}, UNKNOWN_NAME),
    ],
)
def test_thread_info_current_name_fallbacks(payload: dict[str, object], expected: str) -> None:
    assert ThreadInfo.model_validate(payload).current_name == expected


def test_thread_info_keeps_raw() -> None:
    payload = {"threadID": "1", "name": "X", "participantIDs": ["a", "b"]}
    info = ThreadInfo.model_validate(payload)

    assert info.thread_id == "1"
    assert info.raw == payload


def test_notification_parses_gateway_shape() -> None:
    payload = {
        "type": "event",
        "logMessageType": "log:thread-name",
        "threadID": 25225211533747620,
        "logMessageData": {"name": "New name"},
        "author": "100012345",
    }
    notification = Notification.model_validate(payload)

    assert notification.type == "event"
    assert notification.log_message_type == "log:thread-name"
    assert notification.thread_id == "25225211533747620"
    assert notification.log_message_data == {"name": "New name"}
    assert notification.raw == payload


def test_notification_tolerates_odd_shapes() -> None:
    notification = Notification.model_validate({"threadID": "", "logMessageData": ["x"]})

    assert notification.type is None
    assert notification.thread_id is None
    assert notification.log_message_data is None


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"name": True}, "True"),
        ({"name": 0, "threadName": "Secondary"}, "Secondary"),
        ({"name": 12345}, "12345"),
        ({"name": False, "threadName": ""}, UNKNOWN_NAME),
    ],
)
def test_thread_info_tolerates_non_string_titles(payload: dict[str, object], expected: str) -> None:
    assert ThreadInfo.model_validate(payload).current_name == expected


def test_notification_with_numeric_type_still_validates() -> None:
    notification = Notification.model_validate({"type": 1, "logMessageType": "log:thread-name", "threadID": "1"})

    assert notification.type == "1"
