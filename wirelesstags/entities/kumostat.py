"""Virtual thermostat ("Kumostat") linked to a tag."""

import logging
from typing import Any, Dict, Optional

from ..const import (
    KEY_THERMOSTAT,
    URL_SET_THERMOSTAT_TARGET,
    URL_THERMOSTAT_FAN,
    URL_THERMOSTAT_ON_OFF,
)
from ..core.exceptions import WirelessTagException
from ..core.property_map import MappedPropertiesMixin
from ..models.schemas import THERMOSTAT_PROPERTIES
from ..models.sensor_type import SensorType
from .monitoring_config import MonitoringConfig

_LOGGER = logging.getLogger(__name__)


class Kumostat(MappedPropertiesMixin):
    """Thermostat settings of a Kumostat tag.

    Properties map onto the ``thermostat`` record inside the tag's data.
    Temperatures are in the unit configured for the controlling temperature
    sensor, and native Celsius until that sensor is resolved.
    """

    _store_attr = "record"

    def __init__(self, tag: Any) -> None:
        super().__init__()
        self.wireless_tag = tag
        self._temp_sensor = None
        self.bind_properties(THERMOSTAT_PROPERTIES, KEY_THERMOSTAT)

    @property
    def record(self) -> Dict[str, Any]:
        return self.wireless_tag.data.get(KEY_THERMOSTAT) or {}

    @property
    def name(self) -> str:
        return f"thermostat {self.wireless_tag.name}"

    def monitoring_config(self) -> MonitoringConfig:
        """Config of the controlling temperature sensor, once resolved."""
        if self._temp_sensor is not None:
            return self._temp_sensor.monitoring_config()
        return MonitoringConfig(SensorType.TEMP)

    async def temp_sensor(self):
        """Resolve, initialize and cache the controlling temperature sensor.

        Raises:
            WirelessTagException: If no tag has the configured UUID
        """
        uuid = self.temp_tag_uuid
        if self._temp_sensor is not None and self._temp_sensor.wireless_tag.uuid == uuid:
            return self._temp_sensor

        tag = self.wireless_tag
        if uuid != tag.uuid:
            manager = tag.wireless_tag_manager
            tags = await manager.discover_tags({"uuid": uuid}) if manager is not None else []
            if not tags:
                raise WirelessTagException(f"failed to find tag {uuid}")
            tag = tags[0]

        self._temp_sensor = await tag.initialize_sensor(SensorType.TEMP)
        return self._temp_sensor

    async def set(self) -> "Kumostat":
        """Send the target range and controlling sensor to the cloud.

        A controlling sensor on another tag is armed afterwards.
        """
        tag = self.wireless_tag
        # thresholds go out in native Celsius
        tag.data = await tag.call_api(
            URL_SET_THERMOSTAT_TARGET,
            {
                "thermostatId": tag.slave_id,
                "tempSensorUuid": self.temp_tag_uuid,
                "th_high": self.record.get("th_high"),
                "th_low": self.record.get("th_low"),
            },
        )
        sensor = await self.temp_sensor()
        if sensor.wireless_tag.uuid != tag.uuid:
            await sensor.arm()
        return self

    async def turn_fan_on(self) -> Any:
        return await self._switch(URL_THERMOSTAT_FAN, {"turnOn": True})

    async def turn_fan_off(self) -> Any:
        """Switch the fan to auto."""
        return await self._switch(URL_THERMOSTAT_FAN, {"turnOn": False})

    async def turn_ac_heat_on(self) -> Any:
        return await self._switch(URL_THERMOSTAT_ON_OFF, {"turnOff": False})

    async def turn_ac_heat_off(self) -> Any:
        return await self._switch(URL_THERMOSTAT_ON_OFF, {"turnOff": True})

    async def _switch(self, endpoint: str, body: Dict[str, Any]) -> Any:
        tag = self.wireless_tag
        tag.data = await tag.call_api(endpoint, {"thermostatId": tag.slave_id, **body})
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("%s switched via %s: %s", self.name, endpoint, body)
        return tag

    def as_dict(self) -> Dict[str, Any]:
        return self.mapped_values()

    def __repr__(self) -> str:
        return f"<Kumostat {self.name}: {self.as_dict()!r}>"
