from __future__ import annotations

from namelock._redact import redact_cookie_header, redact_for_log


def test_cookie_header_keeps_names_and_masks_values() -> None:
    assert redact_cookie_header("c_user=100012345; xs=42%3Aabc") == "c_user=<redacted>; xs=<redacted>"


def test_cookie_header_tolerates_stray_separators() -> None:
    assert redact_cookie_header(" c_user=1;; flag ;") == "c_user=<redacted>; flag"


def test_request_headers_lose_cookie_values() -> None:
    headers = {
        "accept": "application/json",
        "cookie": "c_user=100012345; xs=session-secret",
        "user-agent": "namelock/1",
    }

    redacted = redact_for_log(headers)

    assert redacted["accept"] == "application/json"
    assert redacted["cookie"] == "c_user=<redacted>; xs=<redacted>"
    assert "session-secret" not in str(redacted)


def test_gateway_bodies_lose_session_fields() -> None:
    body = {
        "threadID": "25225211533747620",
        "name": "L0CK3D",
        "cookies": {"xs": "session-secret"},
        "participants": [{"id": "1", "fb_dtsg": "dtsg-secret"}],
    }

    redacted = redact_for_log(body)

    assert redacted["name"] == "L0CK3D"
    assert redacted["cookies"] == "<redacted>"
    assert redacted["participants"] == [{"id": "1", "fb_dtsg": "<redacted>"}]


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log({"value": "x" * 600}, max_string=10)
    assert redacted["value"] == "x" * 10 + "…<truncated>"


def test_redact_for_log_passes_scalars_through() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(7) == 7
    assert redact_for_log(b"abc") == "<bytes:3b>"
