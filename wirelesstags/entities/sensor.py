"""Sensor entity: typed view onto one sensor of a tag."""

import logging
from typing import Any, Dict, Optional

from ..const import (
    CONFIG_ACTION_SET,
    EVENT_CONFIG,
    UNMONITORED_STATES,
)
from ..core.events import EventSource
from ..core.exceptions import OperationUnsupportedError, RetryUnsuccessfulError
from ..core.property_map import MappedPropertiesMixin
from ..models.schemas import SENSOR_PROPERTIES
from ..models.sensor_type import SENSOR_API_SPECS, ApiSpec, SensorType
from .monitoring_config import MonitoringConfig

_LOGGER = logging.getLogger(__name__)


class WirelessTagSensor(MappedPropertiesMixin, EventSource):
    """One sensor of a ``WirelessTag``.

    The sensor keeps no data of its own: its properties read and write the
    owning tag's ``data``, so they reflect every tag refresh immediately.

    Events:
        ``update`` (sensor, name, value, raw) when a property is set
        ``config`` (sensor, config, action) when the monitoring config is
        set, updated or saved
    """

    def __init__(self, tag: Any, sensor_type: str) -> None:
        super().__init__()
        self.wireless_tag = tag
        self.sensor_type = SensorType(sensor_type)
        self._config: Optional[MonitoringConfig] = None
        self.bind_properties(SENSOR_PROPERTIES, self.sensor_type.value)

    @property
    def data(self) -> Dict[str, Any]:
        return self.wireless_tag.data

    @property
    def name(self) -> str:
        return f"{self.sensor_type} sensor of {self.wireless_tag.name}"

    @property
    def api_spec(self) -> ApiSpec:
        return SENSOR_API_SPECS[self.sensor_type]

    async def call_api(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return await self.wireless_tag.call_api(endpoint, body)

    # ---------------------------
    # Monitoring state
    # ---------------------------

    def is_armed(self) -> Optional[bool]:
        """Whether the sensor is armed, or None if it has no event state."""
        if self.property_spec("event_state") is None:
            return None
        event_state = self.event_state
        if event_state is None:
            return None
        return event_state not in UNMONITORED_STATES

    def can_arm(self) -> bool:
        return bool(self.api_spec.arm)

    def can_disarm(self) -> bool:
        return bool(self.api_spec.disarm)

    async def arm(self) -> "WirelessTagSensor":
        """Arm the sensor for monitoring.

        Returns:
            The sensor, once the tag's data show it armed

        Raises:
            OperationUnsupportedError: If the sensor type cannot be armed
            OperationIncompleteError: If the tag never reported it armed
        """
        if self.is_armed():
            return self
        if not self.can_arm():
            raise OperationUnsupportedError(f"{self.sensor_type} does not support arming", self, "arm")
        return await self._change_armed_status()

    async def disarm(self) -> "WirelessTagSensor":
        """Disarm the sensor. See ``arm()``."""
        if not self.is_armed():
            return self
        if not self.can_disarm():
            raise OperationUnsupportedError(
                f"{self.sensor_type} does not support disarming", self, "disarm"
            )
        return await self._change_armed_status()

    async def _change_armed_status(self) -> "WirelessTagSensor":
        was_armed = self.is_armed()
        action = "disarm" if was_armed else "arm"
        endpoint = getattr(self.api_spec, action)
        if not endpoint:
            raise OperationUnsupportedError(f"no API for {action}ing {self.name}", self, action)

        body = dict(self.api_spec.arm_data) if action == "arm" else {}
        body["id"] = self.wireless_tag.slave_id
        self.wireless_tag.data = await self.call_api(endpoint, body)

        if was_armed is None or was_armed != self.is_armed():
            return self

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("%s still not %sed, confirming with updates", self.name, action)

        def state_changed(tag: Any, attempt: int) -> bool:
            sensor = tag.sensor(self.sensor_type)
            if sensor.is_armed() != was_armed:
                return True
            raise RetryUnsuccessfulError(
                f"event state of {sensor.name} failed to change to {action}ed "
                f"after {attempt} update attempts",
                sensor,
                action,
                attempt,
            )

        tag = await self.wireless_tag.retry_update_until(state_changed, operation=action)
        return tag.sensor(self.sensor_type)

    # ---------------------------
    # Monitoring config
    # ---------------------------

    def monitoring_config(self, new_config: Optional[MonitoringConfig] = None) -> MonitoringConfig:
        """Get, or replace, the sensor's monitoring config.

        The first call without arguments creates an empty config bound to
        this sensor; ``update()`` on it loads the settings. Replacing the
        config emits ``config`` with action ``set`` if the data differ.
        """
        if new_config is not None:
            old_data = self._config.data if self._config is not None else {}
            self._config = new_config
            if old_data != new_config.data:
                self.emit(EVENT_CONFIG, self, new_config, CONFIG_ACTION_SET)
        elif self._config is None:
            self._config = MonitoringConfig.create(self)
        return self._config

    def as_dict(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {"sensor_type": self.sensor_type.value}
        values.update(self.mapped_values())
        values["monitoring_config"] = self.monitoring_config().as_dict()
        return values

    def __repr__(self) -> str:
        return f"<WirelessTagSensor {self.name}: {self.mapped_values()!r}>"
