"""Monitoring configuration of a sensor."""

import logging
from typing import Any, Dict, List, Optional, Set

from ..const import (
    CONFIG_ACTION_SAVE,
    CONFIG_ACTION_UPDATE,
    EVENT_CONFIG,
    KEY_CONFIG_TYPE,
    MODIFIED_ALL,
    URL_SET_OOR_GRACE,
)
from ..core.events import EventSource
from ..core.exceptions import OperationUnsupportedError
from ..core.property_map import MappedPropertiesMixin
from ..core.xforms import GroupedSubObject, delegating_accessor
from ..models.schemas import MONITORING_PROPERTIES
from ..models.sensor_type import SENSOR_API_SPECS, SensorType

_LOGGER = logging.getLogger(__name__)


class MonitoringConfig(MappedPropertiesMixin, EventSource):
    """Thresholds, notification and responsiveness settings of a sensor.

    Properties map onto the raw config record in ``data``. Writing one marks
    it modified; ``save()`` sends the record back and clears the marks,
    ``update()`` reloads it unless there are unsaved changes.

    A config created without a sensor is a detached placeholder: ``save()``
    and ``update()`` do nothing.
    """

    def __init__(
        self,
        sensor_type: str,
        data: Optional[Dict[str, Any]] = None,
        sensor: Any = None,
    ) -> None:
        super().__init__()
        self.sensor_type = SensorType(sensor_type)
        self.sensor = sensor
        self._data: Dict[str, Any] = data if data is not None else {}
        self._loaded = data is not None
        self._modified: Set[str] = set()
        self.bind_properties(MONITORING_PROPERTIES, self.sensor_type.value)

    @classmethod
    def create(cls, sensor: Any, data: Optional[Dict[str, Any]] = None) -> "MonitoringConfig":
        """Create a config bound to ``sensor``.

        Tags with an accelerometer get its sensitivity overlaid on the
        motion settings; out-of-range configs also expose the sensor's
        grace period.
        """
        config = cls(sensor.sensor_type, data, sensor)
        if sensor.sensor_type in (SensorType.MOTION, SensorType.EVENT):
            if sensor.wireless_tag.has_accelerometer():
                config.bind_properties(MONITORING_PROPERTIES, "accelerometer")
        elif sensor.sensor_type == SensorType.OUT_OF_RANGE:
            config.bind_property("grace_period", delegating_accessor(sensor, "grace_period"))
        return config

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    @data.setter
    def data(self, data: Optional[Dict[str, Any]]) -> None:
        self._data = data if data is not None else {}
        self._loaded = True

    def is_loaded(self) -> bool:
        """Whether the config holds a record from the cloud or from the caller."""
        return self._loaded

    @property
    def name(self) -> str:
        owner = self.sensor.name if self.sensor is not None else "detached"
        return f"{owner} monitoring config"

    # ---------------------------
    # Modification tracking
    # ---------------------------

    def _groups(self) -> Dict[str, GroupedSubObject]:
        groups = {}
        for name in self.mapped_property_names():
            getter = self.property_spec(name).get
            if isinstance(getter, GroupedSubObject):
                groups[name] = getter
        return groups

    def field_ids(self) -> Set[str]:
        """All identifiers ``mark_modified()`` accepts."""
        ids = set(self.data)
        for name in self.mapped_property_names():
            ids.add(name)
            source_key = self.property_spec(name).source_key
            if source_key is not None:
                ids.add(source_key)
        for group in self._groups().values():
            ids.update(group.leaf_ids())
            ids.update(group.key_map.values())
        return ids

    def mark_modified(self, key: Optional[str] = None) -> "MonitoringConfig":
        """Mark a field, or every field, as modified.

        Args:
            key: Property name, raw key or ``group.field``; all fields if omitted

        Raises:
            KeyError: If ``key`` is not a field of this config
        """
        if key is None:
            keys = set(self.data) | set(self.mapped_property_names())
            for group in self._groups().values():
                keys.update(group.leaf_ids())
            self._modified.update(keys or {MODIFIED_ALL})
            return self
        if key == MODIFIED_ALL:
            self._modified.add(key)
            return self
        if key not in self.field_ids():
            raise KeyError(f"{key!r} is not a field of the {self.sensor_type} monitoring config")
        self._modified.add(key)
        group = self._groups().get(key)
        if group is not None:
            self._modified.update(group.leaf_ids())
            self._modified.update(group.key_map.values())
        return self

    def is_modified(self, key: Optional[str] = None) -> bool:
        if key is None:
            return bool(self._modified)
        return key in self._modified

    def modified_fields(self) -> List[str]:
        return sorted(self._modified)

    def reset_modified(self) -> "MonitoringConfig":
        self._modified.clear()
        return self

    # ---------------------------
    # Persistence
    # ---------------------------

    async def save(self, apply_all: bool = False, all_mac: bool = False) -> "MonitoringConfig":
        """Send modified settings to the cloud.

        Does nothing until the config has been loaded, since the cloud
        replaces the whole record with what is sent.

        Args:
            apply_all: Apply to all tags of the same kind under the tag manager
            all_mac: With ``apply_all``, apply under all tag managers

        Raises:
            OperationUnsupportedError: If the sensor type has no save endpoint
        """
        if not self.is_modified():
            return self
        if self.sensor is None:
            return self
        if not self._loaded:
            _LOGGER.warning(f"Not saving {self.name}, it was never loaded")
            return self
        api_spec = SENSOR_API_SPECS[self.sensor_type]
        if not api_spec.save:
            raise OperationUnsupportedError(
                f"no API for saving the {self.sensor_type} monitoring config",
                self.sensor,
                "save",
            )
        tag = self.sensor.wireless_tag

        if self.sensor_type == SensorType.OUT_OF_RANGE and self.is_modified("grace_period"):
            # sends the raw code, not the seconds the property reports
            tag.data = await self.sensor.call_api(
                URL_SET_OOR_GRACE,
                {"id": tag.slave_id, "oorGrace": self.sensor.data.get("oorGrace"), "applyAll": apply_all},
            )

        config = {key: value for key, value in self.data.items() if key != KEY_CONFIG_TYPE}
        await self.sensor.call_api(
            api_spec.save,
            {"id": tag.slave_id, "config": config, "applyAll": apply_all, "allMac": all_mac},
        )
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Saved %s (modified: %s)", self.name, self.modified_fields())
        self.reset_modified()
        self.sensor.emit(EVENT_CONFIG, self.sensor, self, CONFIG_ACTION_SAVE)
        return self

    async def update(self) -> "MonitoringConfig":
        """Reload the config from the cloud.

        Does nothing while there are unsaved modifications.

        Raises:
            OperationUnsupportedError: If the sensor type has no load endpoint
        """
        if self.is_modified():
            _LOGGER.debug("Not reloading %s, it has unsaved changes", self.name)
            return self
        if self.sensor is None:
            return self
        api_spec = SENSOR_API_SPECS[self.sensor_type]
        if not api_spec.load:
            raise OperationUnsupportedError(
                f"no API for loading the {self.sensor_type} monitoring config",
                self.sensor,
                "update",
            )
        result = await self.sensor.call_api(api_spec.load, {"id": self.sensor.wireless_tag.slave_id})
        if api_spec.payload_key and isinstance(result, dict):
            result = result.get(api_spec.payload_key)
        self.data = result or {}
        self.sensor.emit(EVENT_CONFIG, self.sensor, self, CONFIG_ACTION_UPDATE)
        return self

    def as_dict(self) -> Dict[str, Any]:
        return self.mapped_values()

    def __repr__(self) -> str:
        return f"<MonitoringConfig {self.sensor_type}: {self.as_dict()!r}>"
