"""App state cookie model."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AppStateCookie(BaseModel):
    """One cookie from an exported browser app state.

    Exports use ``key`` for the cookie name; some tools write ``name``
    instead, so both are accepted.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    key: str = Field(validation_alias=AliasChoices("key", "name"), min_length=1)
    value: str
    domain: str | None = None
    path: str | None = None

    def as_pair(self) -> tuple[str, str]:
        return self.key, self.value
