"""Session state derived from app state cookies."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from namelock.exceptions import AuthenticationError
from namelock.models.appstate import AppStateCookie

#: Cookie carrying the numeric account id.
USER_ID_COOKIE = "c_user"


class Session(BaseModel):
    """Authenticated session built from browser cookies.

    Parameters
    ----------
    user_id : str
        Account id taken from the ``c_user`` cookie.
    cookies : dict[str, str]
        Cookie name to value mapping sent with every request.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    user_id: str
    cookies: dict[str, str]

    @classmethod
    def from_appstate(cls, appstate: Iterable[AppStateCookie]) -> Session:
        """Build a session, requiring the account id cookie."""
        cookies = dict(cookie.as_pair() for cookie in appstate)
        user_id = cookies.get(USER_ID_COOKIE, "").strip()
        if not user_id:
            raise AuthenticationError(
                f"App state has no {USER_ID_COOKIE!r} cookie; export it from a logged-in session",
                code="missing_user",
            )
        return cls(user_id=user_id, cookies=cookies)

    def cookie_header(self) -> str:
        """Value for the ``Cookie`` request header."""
        return "; ".join(f"{k}={v}" for k, v in self.cookies.items())

