"""Lock configuration for namelock."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from namelock.exceptions import ConfigError

DEFAULT_BASE_URL = "https://gateway.messenger.local/api"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_ms(value: str) -> float:
    """Parse a millisecond env value into seconds."""
    try:
        return int(value) / 1000.0
    except ValueError as exc:
        raise ConfigError(f"Expected an integer number of milliseconds, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class LockConfig:
    """Desired state plus scheduling and connection settings.

    Parameters
    ----------
    thread_id : str
        Identifier of the group thread whose title is locked.
    locked_name : str
        Title the thread must carry.
    appstate_path : str
        Path to the JSON cookie dump used to authenticate.
    poll_interval : float
        Seconds between polls while the title is correct.
    settle_delay : float
        Seconds to wait after a title-change notification before writing
        the locked name back.
    correction_recheck : float
        Seconds between a poll-triggered correction and the next poll.
    error_backoff : float
        Seconds to wait after a failed thread info read.
    port : int
        Port of the liveness HTTP endpoint.
    base_url : str
        Base URL of the messaging gateway HTTP API.
    mqtt_host : str
        Notification broker host.
    mqtt_port : int
        Notification broker port.
    mqtt_topic : str
        Topic carrying thread notifications.
    mqtt_tls : bool
        Use TLS for the broker connection.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    """

    thread_id: str
    locked_name: str
    appstate_path: str = "appstate.json"
    poll_interval: float = 30.0
    settle_delay: float = 0.2
    correction_recheck: float = 5.0
    error_backoff: float = 60.0
    port: int = 3000
    base_url: str = DEFAULT_BASE_URL
    mqtt_host: str = "edge-chat.messenger.local"
    mqtt_port: int = 8883
    mqtt_topic: str = "/t_ms"
    mqtt_tls: bool = True
    mqtt_keepalive: int = 60

    def __post_init__(self) -> None:
        if not self.thread_id.strip():
            raise ConfigError("thread_id must be non-empty")
        if not self.locked_name.strip():
            raise ConfigError("locked_name must be non-empty")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval}")

    @classmethod
    def from_env(cls, **overrides: Any) -> LockConfig:
        """Create configuration from environment variables.

        Reads ``NAMELOCK_THREAD_ID``, ``NAMELOCK_LOCKED_NAME`` and the
        optional ``NAMELOCK_*`` variables, plus ``PORT`` for the liveness
        endpoint. Explicit keyword arguments override environment values;
        ``None`` overrides are ignored so CLI defaults fall through.

        Returns
        -------
        LockConfig
            Populated configuration.

        Raises
        ------
        ConfigError
            When a required value is missing or a numeric value is invalid.
        """
        env = os.environ
        overrides = {key: value for key, value in overrides.items() if value is not None}

        _ENV_CONFIG_MAP = {
            "NAMELOCK_THREAD_ID": "thread_id",
            "NAMELOCK_LOCKED_NAME": "locked_name",
            "NAMELOCK_APPSTATE": "appstate_path",
            "NAMELOCK_BASE_URL": "base_url",
            "NAMELOCK_MQTT_HOST": "mqtt_host",
            "NAMELOCK_MQTT_TOPIC": "mqtt_topic",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("NAMELOCK_POLL_INTERVAL_MS")
        if interval_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = _env_ms(interval_env)

        try:
            port_env = env.get("PORT")
            if port_env is not None and "port" not in overrides:
                config_kwargs["port"] = int(port_env)

            mqtt_port_env = env.get("NAMELOCK_MQTT_PORT")
            if mqtt_port_env is not None and "mqtt_port" not in overrides:
                config_kwargs["mqtt_port"] = int(mqtt_port_env)

            keepalive_env = env.get("NAMELOCK_MQTT_KEEPALIVE")
            if keepalive_env is not None and "mqtt_keepalive" not in overrides:
                config_kwargs["mqtt_keepalive"] = int(keepalive_env)
        except ValueError as exc:
            raise ConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("NAMELOCK_MQTT_TLS"), True)

        config_kwargs.update(overrides)

        for required in ("thread_id", "locked_name"):
            if required not in config_kwargs:
                raise ConfigError(f"Missing required setting {required!r} (set NAMELOCK_{required.upper()})")

        return cls(**config_kwargs)
