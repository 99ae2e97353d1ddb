"""Thread info model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from namelock.models._coerce import loose_str

#: Reported when neither ``name`` nor ``threadName`` carries a title.
UNKNOWN_NAME = "Unknown"


class ThreadInfo(BaseModel):
    """Snapshot of a group thread as returned by the reader endpoint.

    Only the title fields matter for locking; everything else is kept in
    ``raw``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    thread_id: str | None = Field(default=None, validation_alias=AliasChoices("threadID", "threadId", "thread_id"))
    name: str | None = None
    thread_name: str | None = Field(default=None, validation_alias=AliasChoices("threadName", "thread_name"))

    raw: dict[str, Any] = Field(default_factory=dict)
    """Full API response dict."""

    @field_validator("thread_id", "name", "thread_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return loose_str(value)

    @property
    def current_name(self) -> str:
        """Observed title, falling back to ``threadName`` then ``"Unknown"``."""
        return self.name or self.thread_name or UNKNOWN_NAME

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged
