"""Real-time notification model.

Gateways deliver thread notifications as
``{type, logMessageType, threadID, logMessageData?}``. Field spelling is not
stable across gateway versions, so everything except ``type`` is optional
and the original payload is stashed in ``raw``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from namelock.models._coerce import loose_str


class Notification(BaseModel):
    """One item from the notification stream."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    type: str | None = None
    log_message_type: Any = None
    """Sub-type label such as ``"log:thread-name"``; not always a string."""

    thread_id: str | None = Field(default=None, alias="threadID")
    log_message_data: dict[str, Any] | None = None

    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("type", "thread_id", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return loose_str(value)

    @field_validator("log_message_data", mode="before")
    @classmethod
    def _drop_non_mapping(cls, value: Any) -> dict[str, Any] | None:
        return value if isinstance(value, dict) else None

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged
