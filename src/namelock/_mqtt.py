"""Internal MQTT bootstrap, parsing, and runtime helpers."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt
from pydantic import ValidationError

from namelock._redact import redact_cookie_header, redact_for_log
from namelock.config import LockConfig
from namelock.exceptions import NotificationStreamError
from namelock.models.notification import Notification
from namelock.session import Session

StreamItem = Notification | NotificationStreamError


@dataclass(frozen=True)
class MqttBootstrap:
    """Broker/session data required to connect to the notification broker."""

    broker_host: str
    broker_port: int
    topic: str
    client_id: str
    username: str
    password: str
    tls: bool


def build_mqtt_bootstrap(config: LockConfig, session: Session) -> MqttBootstrap:
    """Derive broker connection details from configuration and session."""
    return MqttBootstrap(
        broker_host=config.mqtt_host,
        broker_port=config.mqtt_port,
        topic=config.mqtt_topic,
        client_id=f"namelock_{session.user_id}",
        username=session.user_id,
        password=session.cookie_header(),
        tls=config.mqtt_tls,
    )


def decode_notification(payload: bytes) -> Notification:
    """Decode an MQTT payload into a :class:`Notification`.

    Raises
    ------
    NotificationStreamError
        When the payload is not a JSON object.
    """
    try:
        parsed = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise NotificationStreamError(f"Notification payload is not JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise NotificationStreamError("Notification payload is not a JSON object")
    try:
        return Notification.model_validate(parsed)
    except ValidationError as exc:
        raise NotificationStreamError(f"Notification payload rejected: {exc.error_count()} error(s)") from exc


class NotificationRuntime:
    """Threaded paho-mqtt runtime that emits notifications onto an asyncio loop.

    Every decoded notification, and every transport problem, is handed to
    ``on_item`` on the event loop thread. paho's network loop reconnects on
    its own; this runtime never restarts the subscription itself.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_item: Callable[[StreamItem], None],
        keepalive: int = 60,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_item = on_item
        self._keepalive = keepalive
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._topic: str | None = None

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    def _emit(self, item: StreamItem) -> None:
        self._loop.call_soon_threadsafe(self._on_item, item)

    def start(self, bootstrap: MqttBootstrap) -> None:
        """Connect and subscribe with provided broker details."""
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s topic=%s client_id=%s password=%s",
            bootstrap.broker_host,
            bootstrap.broker_port,
            bootstrap.topic,
            bootstrap.client_id,
            redact_cookie_header(bootstrap.password),
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=bootstrap.client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        client.username_pw_set(bootstrap.username, bootstrap.password)
        if bootstrap.tls:
            client.tls_set()

        self._topic = bootstrap.topic

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._emit(NotificationStreamError(f"MQTT connect failed: {reason_code}"))
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)
            if self._topic:
                self._logger.debug("MQTT subscribing topic=%s", self._topic)
                c.subscribe(self._topic, qos=0)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            try:
                notification = decode_notification(msg.payload)
            except NotificationStreamError as exc:
                self._emit(exc)
                return
            self._logger.debug("MQTT message topic=%s body=%s", msg.topic, redact_for_log(notification.raw))
            self._emit(notification)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._emit(NotificationStreamError(f"MQTT disconnected: {reason_code}"))

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(bootstrap.broker_host, bootstrap.broker_port, keepalive=self._keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._topic = None

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
