"""Loading of the exported app state (credential cookies)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from namelock.exceptions import AppStateError
from namelock.models.appstate import AppStateCookie

_logger = logging.getLogger(__name__)

_COOKIE_LIST = TypeAdapter(list[AppStateCookie])


def load_appstate(path: str | Path) -> list[AppStateCookie]:
    """Read and validate an app state file.

    The file is a JSON array of cookie objects as exported from a logged-in
    browser session.

    Raises
    ------
    AppStateError
        When the file cannot be read, is not JSON, or is not a non-empty
        list of cookie objects.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AppStateError(f"Cannot read app state {file_path}: {exc}", path=str(file_path)) from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AppStateError(f"App state {file_path} is not valid JSON: {exc}", path=str(file_path)) from exc

    try:
        cookies = _COOKIE_LIST.validate_python(raw)
    except ValidationError as exc:
        raise AppStateError(
            f"App state {file_path} is not a list of cookies: {exc.error_count()} validation error(s)",
            path=str(file_path),
        ) from exc

    if not cookies:
        raise AppStateError(f"App state {file_path} contains no cookies", path=str(file_path))

    _logger.debug("Loaded %d app state cookies from %s", len(cookies), file_path)
    return cookies
