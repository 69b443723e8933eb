"""Tag entity: one physical or virtual wireless tag."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from ..const import (
    ARM_RETRY_ATTEMPTS,
    ARM_RETRY_DELAY,
    CLOUD_DATA_DELAY,
    EVENT_DATA,
    EVENT_DISCONNECT,
    EVENT_DISCOVER,
    KEY_THERMOSTAT,
    MAX_UPDATE_LOOP_WAIT,
    MIN_UPDATE_LOOP_WAIT,
    TAG_TYPE_CAMERA,
    TAG_TYPE_KUMOSTAT,
    TAG_TYPE_OUTDOOR,
    TAG_TYPE_WEMO,
    URL_GET_TAG,
    URL_LIVE_UPDATE,
    URL_SET_LOW_POWER,
    URL_SET_POSTBACK_INTERVAL,
)
from ..core.events import EventSource
from ..core.exceptions import WirelessTagException
from ..core.property_map import MappedPropertiesMixin
from ..core.retry import retry_until
from ..models.schemas import TAG_PROPERTIES
from ..models.sensor_type import SensorType
from .kumostat import Kumostat
from .sensor import WirelessTagSensor

_LOGGER = logging.getLogger(__name__)

CallApi = Callable[[str, Optional[Dict[str, Any]]], Awaitable[Any]]

# sensor type -> capability check, in discovery order
_SENSOR_CHECKS = (
    (SensorType.MOTION, "has_motion_sensor"),
    (SensorType.LIGHT, "has_light_sensor"),
    (SensorType.MOISTURE, "has_moisture_sensor"),
    (SensorType.WATER, "has_water_sensor"),
    (SensorType.EVENT, "has_event_sensor"),
    (SensorType.HUMIDITY, "has_humidity_sensor"),
    (SensorType.TEMP, "has_temp_sensor"),
    (SensorType.CURRENT, "has_current_sensor"),
    (SensorType.OUT_OF_RANGE, "has_out_of_range_sensor"),
    (SensorType.BATTERY, "has_battery_sensor"),
    (SensorType.SIGNAL, "has_signal_sensor"),
)

_HARDWARE_FACTS = (
    "has_reed_sensor",
    "has_pir_sensor",
    "has_accelerometer",
    "can_external_temp_probe",
    "can_motion_timeout",
    "can_beep",
    "can_playback",
    "can_high_prec_temp",
    "is_physical_tag",
    "is_outdoor_tag",
    "is_external_temp_probe",
    "is_kumostat",
    "is_nest",
    "is_wemo",
    "is_wemo_led",
    "is_camera",
)

# FILETIME counts 100ns intervals since this date
_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class WirelessTag(MappedPropertiesMixin, EventSource):
    """A tag registered with a tag manager.

    ``data`` holds the record returned by the cloud and is replaced as a
    whole on every refresh. Sensor objects read through to it.

    Events:
        ``data`` (tag) when non-empty data are set
        ``update`` (tag, name, value, raw) when a property is set
        ``discover`` (sensor) when a sensor is initialized
    """

    def __init__(
        self,
        manager: Any = None,
        data: Optional[Dict[str, Any]] = None,
        call_api: Optional[CallApi] = None,
    ) -> None:
        super().__init__()
        self.wireless_tag_manager = manager
        self._call_api = call_api
        self._data: Dict[str, Any] = {}
        self._sensors: Dict[SensorType, WirelessTagSensor] = {}
        self._initialized: Set[SensorType] = set()
        self._update_task: Optional[asyncio.Task] = None
        self._remove_disconnect: Optional[Callable[[], Any]] = None
        self.bind_properties(TAG_PROPERTIES, "tag")
        self.data = data or {}
        self.thermostat: Optional[Kumostat] = Kumostat(self) if self.is_kumostat() else None

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    @data.setter
    def data(self, data: Optional[Dict[str, Any]]) -> None:
        self._data = data or {}
        if data:
            self.emit(EVENT_DATA, self)

    async def call_api(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Any:
        if self._call_api is not None:
            return await self._call_api(endpoint, body)
        if self.wireless_tag_manager is None:
            raise WirelessTagException(f"tag {self.name} is not connected to a tag manager")
        return await self.wireless_tag_manager.call_api(endpoint, body)

    # ---------------------------
    # Hardware facts
    # ---------------------------

    def _rev(self) -> int:
        return self.rev or 0

    def has_motion_sensor(self) -> bool:
        rev = self._rev()
        if (rev & 0x0F) == 0x0E and rev >= 0x4E:
            return False
        return self.tag_type in (12, 13, 21)

    def has_light_sensor(self) -> bool:
        return self.tag_type == 26

    def has_moisture_sensor(self) -> bool:
        return (self.is_outdoor_tag() and (self._rev() & 0x0F) == 0x0E) or self.tag_type in (32, 33)

    def has_water_sensor(self) -> bool:
        return self.tag_type in (32, 33)

    def has_reed_sensor(self) -> bool:
        return self.tag_type in (52, 53)

    def has_pir_sensor(self) -> bool:
        return self.tag_type == 72

    def has_event_sensor(self) -> bool:
        return (
            self.has_motion_sensor()
            or self.has_light_sensor()
            or self.has_reed_sensor()
            or self.has_pir_sensor()
        )

    def has_humidity_sensor(self) -> bool:
        return self.tag_type in (13, 21, 26, 52, 72, 102, 106, 107)

    def has_temp_sensor(self) -> bool:
        return self.tag_type not in (TAG_TYPE_WEMO, TAG_TYPE_CAMERA)

    def has_current_sensor(self) -> bool:
        return False

    def has_out_of_range_sensor(self) -> bool:
        return self.is_physical_tag()

    def has_battery_sensor(self) -> bool:
        return self.is_physical_tag()

    def has_signal_sensor(self) -> bool:
        return self.is_physical_tag()

    def has_accelerometer(self) -> bool:
        return self.has_motion_sensor() and (self._rev() & 0x0F) == 0x0A

    def can_external_temp_probe(self) -> bool:
        return self.has_reed_sensor() or self.is_outdoor_tag()

    def can_motion_timeout(self) -> bool:
        rev = self._rev()
        return self.has_motion_sensor() and rev >= 14 and (self.tag_type != 12 or rev != 15)

    def can_beep(self) -> bool:
        return self.tag_type in (12, 13, 21, 26)

    def can_playback(self) -> bool:
        return self.tag_type == 21

    def can_high_prec_temp(self) -> bool:
        """Whether the temperature sensor has more than 8 bits."""
        return self.tag_type in (13, 21, 52, 26, 72, TAG_TYPE_OUTDOOR, 106) or self.is_kumostat()

    def is_physical_tag(self) -> bool:
        return not (self.is_kumostat() or self.is_nest() or self.is_wemo() or self.is_camera())

    def is_outdoor_tag(self) -> bool:
        return self.tag_type == TAG_TYPE_OUTDOOR

    def is_external_temp_probe(self) -> bool:
        return self.is_outdoor_tag() and (self._rev() & 0x0F) == 0x0D

    def is_kumostat(self) -> bool:
        return self.tag_type == TAG_TYPE_KUMOSTAT

    def is_nest(self) -> bool:
        thermostat = self.data.get(KEY_THERMOSTAT)
        return bool(thermostat) and thermostat.get("nest_id") is not None

    def is_wemo(self) -> bool:
        return self.tag_type == TAG_TYPE_WEMO

    def is_wemo_led(self) -> bool:
        return self.is_wemo() and (self.data.get("cap") or 0) > 0

    def is_camera(self) -> bool:
        return self.tag_type == TAG_TYPE_CAMERA

    def sensor_capabilities(self) -> List[SensorType]:
        """Sensor types this tag supports."""
        return [sensor_type for sensor_type, check in _SENSOR_CHECKS if getattr(self, check)()]

    def hardware_facts(self) -> List[str]:
        """Names of the capabilities and facts that hold for this tag."""
        return [fact for fact in _HARDWARE_FACTS if getattr(self, fact)()]

    def version(self) -> str:
        version1 = self.data.get("version1")
        rev = self._rev()
        if version1 == 2:
            return {14: "2.1", 15: "2.2", 31: "2.3", 32: "2.4"}.get(rev, "2.5" if rev > 32 else "2.0")
        if version1 and version1 >= 3:
            return f"{version1:.1f}"
        if self.tag_type == 12 and rev in (0, 1, 11, 12, 13):
            return {0: "1.1", 1: "1.2", 11: "1.3", 12: "1.4", 13: "1.5"}[rev]
        return f"{version1:.1f}" if version1 else "1.0"

    def last_updated(self) -> Optional[datetime]:
        """When the tag last posted data to the cloud."""
        last_comm = self.data.get("lastComm")
        if last_comm is None:
            return None
        return _FILETIME_EPOCH + timedelta(microseconds=last_comm // 10)

    # ---------------------------
    # Sensors
    # ---------------------------

    def sensor(self, sensor_type: str) -> WirelessTagSensor:
        """Return the sensor of the given type, creating it if needed.

        Raises:
            ValueError: If the tag does not support the sensor type
        """
        sensor_type = SensorType(sensor_type)
        sensor = self._sensors.get(sensor_type)
        if sensor is None:
            if sensor_type not in self.sensor_capabilities():
                raise ValueError(f"tag {self.name} does not support {sensor_type} sensor")
            sensor = WirelessTagSensor(self, sensor_type)
            self._sensors[sensor_type] = sensor
        return sensor

    async def initialize_sensor(self, sensor_type: str) -> WirelessTagSensor:
        """Return the sensor of the given type with its monitoring config loaded.

        Emits ``discover`` for a newly initialized sensor.
        """
        sensor_type = SensorType(sensor_type)
        sensor = self.sensor(sensor_type)
        if sensor_type in self._initialized:
            return sensor
        if sensor.api_spec.load:
            await sensor.monitoring_config().update()
        self._initialized.add(sensor_type)
        self.emit(EVENT_DISCOVER, sensor)
        return sensor

    async def discover_sensors(self) -> List[WirelessTagSensor]:
        return [await self.initialize_sensor(sensor_type) for sensor_type in self.sensor_capabilities()]

    def each_sensor(self, action: Optional[Callable[[WirelessTagSensor], Any]] = None) -> List[Any]:
        """Apply ``action`` to every sensor created so far."""
        sensors = [self._sensors[t] for t, _ in _SENSOR_CHECKS if t in self._sensors]
        if action is None:
            return sensors
        return [action(sensor) for sensor in sensors]

    # ---------------------------
    # Refresh
    # ---------------------------

    async def update(self) -> "WirelessTag":
        """Fetch the tag's latest data as last posted to the cloud."""
        self.data = await self.call_api(URL_GET_TAG, {"slaveid": self.slave_id})
        return self

    async def live_update(self) -> "WirelessTag":
        """Ask the tag to post current data, then fetch them.

        Tags in low power mode can take 5 to 15 seconds to respond.
        """
        self.data = await self.call_api(URL_LIVE_UPDATE, {"id": self.slave_id})
        return self

    async def retry_update_until(
        self,
        success: Callable[["WirelessTag", int], Any],
        attempts: int = ARM_RETRY_ATTEMPTS,
        delay: float = ARM_RETRY_DELAY,
        operation: Optional[str] = None,
    ) -> "WirelessTag":
        """Repeat ``update()`` until ``success(tag, attempt)`` holds.

        Raises:
            OperationIncompleteError: If no update satisfied the check
        """
        return await retry_until(self.update, success, attempts, delay, self, operation or "update")

    async def update_until(
        self, success: Callable[["WirelessTag"], Any], **retry_options: Any
    ) -> "WirelessTag":
        """Like ``retry_update_until()``, but check an immediate update first."""
        await self.update()
        if success(self):
            return self
        return await self.retry_update_until(lambda tag, attempt: success(tag), **retry_options)

    # ---------------------------
    # Auto-update loop
    # ---------------------------

    def start_update_loop(self, min_wait: Optional[float] = None) -> asyncio.Task:
        """Keep updating the tag as it posts new data to the cloud.

        Each update is scheduled for when the tag's next post is expected
        to be visible, i.e. its last update time plus the update interval
        and the cloud's delay, but never sooner than ``min_wait`` seconds.
        A failed update is logged and doubles the wait before the next
        attempt. The loop stops when the platform disconnects.

        Must be called with an event loop running.

        Args:
            min_wait: Minimum seconds between updates, capped at 30 minutes

        Returns:
            The task running the loop, the existing one if already started
        """
        if self.is_update_loop_running():
            return self._update_task
        wait = MIN_UPDATE_LOOP_WAIT if min_wait is None else min(min_wait, MAX_UPDATE_LOOP_WAIT)
        self._update_task = asyncio.create_task(self._update_loop(wait))
        if self._remove_disconnect is None:
            platform = getattr(self.wireless_tag_manager, "wireless_tag_platform", None)
            if platform is not None:
                self._remove_disconnect = platform.on(EVENT_DISCONNECT, lambda *args: self.stop_update_loop())
        return self._update_task

    def stop_update_loop(self) -> None:
        """Stop the auto-update loop if one is running."""
        task = self._update_task
        self._update_task = None
        # the loop notices on its own when stopped from within an update
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        if self._remove_disconnect is not None:
            self._remove_disconnect()
            self._remove_disconnect = None

    def bounce_update_loop(self) -> Optional[asyncio.Task]:
        """Restart the auto-update loop if one is running."""
        if not self.is_update_loop_running():
            return None
        _LOGGER.warning(f"Restarting update loop for tag {self.slave_id}")
        self.stop_update_loop()
        return self.start_update_loop()

    def is_update_loop_running(self) -> bool:
        return self._update_task is not None and not self._update_task.done()

    def _next_update_delay(self, min_wait: float) -> float:
        last_updated = self.last_updated()
        interval = self.update_interval
        if last_updated is None or interval is None:
            return min_wait
        expected = last_updated + timedelta(seconds=interval + CLOUD_DATA_DELAY)
        remaining = (expected - datetime.now(timezone.utc)).total_seconds()
        return max(remaining, min_wait)

    async def _update_loop(self, min_wait: float) -> None:
        task = asyncio.current_task()
        wait = min_wait
        while self._update_task is task:
            await asyncio.sleep(self._next_update_delay(wait))
            if self._update_task is not task:
                break
            try:
                await self.update()
            except Exception as exc:  # pylint: disable=broad-except
                _LOGGER.error(f"Error updating tag {self.name}: {exc}")
                wait = min(wait * 2, MAX_UPDATE_LOOP_WAIT)
            else:
                wait = MIN_UPDATE_LOOP_WAIT
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Update loop for tag %s stopped", self.name)

    # ---------------------------
    # Settings
    # ---------------------------

    async def set_update_interval(self, value: Optional[int] = None) -> "WirelessTag":
        """Set how often, in seconds, the tag posts data to the cloud.

        Raises:
            TypeError: If the value is not a positive number
            OperationIncompleteError: If the tag never reported the new interval
        """
        if value is None:
            value = self.update_interval
        elif value == self.update_interval:
            return self
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise TypeError(f"invalid update interval {value!r} for tag {self.name}")

        self.data = await self.call_api(URL_SET_POSTBACK_INTERVAL, {"id": self.slave_id, "sec": value})
        if self.update_interval != value:
            await self.retry_update_until(
                lambda tag, attempt: tag.update_interval == value, operation="set_update_interval"
            )
        return self

    async def set_low_power_mode(self, value: Optional[bool] = None) -> "WirelessTag":
        """Turn the tag's low power mode on or off.

        Older tag revisions reject turning it on.

        Raises:
            TypeError: If the value is not a boolean
            OperationIncompleteError: If the tag never reported the new mode
        """
        if value is None:
            value = self.low_power_mode
        elif not isinstance(value, bool):
            raise TypeError(f"invalid power mode value {value!r} for tag {self.name}")
        elif value == self.low_power_mode:
            return self

        self.data = await self.call_api(URL_SET_LOW_POWER, {"id": self.slave_id, "enable": value})
        if self.low_power_mode != value:
            await self.retry_update_until(
                lambda tag, attempt: tag.low_power_mode == value, operation="set_low_power_mode"
            )
        return self

    def as_dict(self) -> Dict[str, Any]:
        values = self.mapped_values()
        values["version"] = self.version()
        values["sensors"] = {str(s.sensor_type): s.as_dict() for s in self.each_sensor()}
        return values

    def __repr__(self) -> str:
        return f"<WirelessTag {self.name!r} uuid={self.uuid}>"
