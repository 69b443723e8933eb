"""Sensor type identifiers and their API endpoints."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class SensorType(str, Enum):
    """Kinds of sensor a physical tag can carry."""

    MOTION = "motion"
    EVENT = "event"
    LIGHT = "light"
    TEMP = "temp"
    HUMIDITY = "humidity"
    MOISTURE = "moisture"
    WATER = "water"
    CURRENT = "current"
    OUT_OF_RANGE = "outofrange"
    BATTERY = "battery"
    SIGNAL = "signal"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ApiSpec:
    """Endpoints backing one sensor type. ``None`` means unsupported."""

    arm: Optional[str] = None
    disarm: Optional[str] = None
    load: Optional[str] = None
    save: Optional[str] = None
    arm_data: Mapping[str, Any] = field(default_factory=dict)
    payload_key: Optional[str] = None


_CLIENT = "/ethClient.asmx/"

_MOTION_CONFIG = {
    "load": _CLIENT + "LoadMotionSensorConfig",
    "save": _CLIENT + "SaveMotionSensorConfig2",
}
_CAP_SENSOR = {
    "arm": _CLIENT + "ArmCapSensor",
    "disarm": _CLIENT + "DisarmCapSensor",
    "load": _CLIENT + "LoadCapSensorConfig2",
    "save": _CLIENT + "SaveCapSensorConfig2",
    "payload_key": "rhEvent",
}

SENSOR_API_SPECS: Dict[SensorType, ApiSpec] = {
    SensorType.MOTION: ApiSpec(**_MOTION_CONFIG),
    SensorType.EVENT: ApiSpec(
        arm=_CLIENT + "Arm",
        disarm=_CLIENT + "Disarm",
        arm_data={"door_mode_set_closed": True},
        **_MOTION_CONFIG,
    ),
    SensorType.LIGHT: ApiSpec(
        arm=_CLIENT + "ArmLightSensor",
        disarm=_CLIENT + "DisarmLightSensor",
        load=_CLIENT + "LoadLightSensorConfig",
        save=_CLIENT + "SaveLightSensorConfig",
    ),
    SensorType.TEMP: ApiSpec(
        arm=_CLIENT + "ArmTempSensor",
        disarm=_CLIENT + "DisarmTempSensor",
        load=_CLIENT + "LoadTempSensorConfig",
        save=_CLIENT + "SaveTempSensorConfig2",
    ),
    SensorType.HUMIDITY: ApiSpec(**_CAP_SENSOR),
    SensorType.MOISTURE: ApiSpec(**_CAP_SENSOR),
    SensorType.WATER: ApiSpec(
        load=_CLIENT + "LoadCapSensorConfig2",
        save=_CLIENT + "SaveWaterSensorConfig2",
        payload_key="shortedEvent",
    ),
    SensorType.CURRENT: ApiSpec(
        arm=_CLIENT + "ArmCurrentSensor",
        disarm=_CLIENT + "DisarmCurrentSensor",
        load=_CLIENT + "LoadCurrentSensorConfig",
        save=_CLIENT + "SaveCurrentSensorConfig2",
    ),
    SensorType.OUT_OF_RANGE: ApiSpec(
        load=_CLIENT + "LoadOutOfRangeConfig",
        save=_CLIENT + "SaveOutOfRangeConfig2",
    ),
    SensorType.BATTERY: ApiSpec(
        load=_CLIENT + "LoadLowBatteryConfig",
        save=_CLIENT + "SaveLowBatteryConfig2",
    ),
    SensorType.SIGNAL: ApiSpec(),
}
