"""Entities mapped onto the cloud's JSON records."""

from .kumostat import Kumostat
from .monitoring_config import MonitoringConfig
from .sensor import WirelessTagSensor
from .tag import WirelessTag
from .tag_manager import WirelessTagManager

__all__ = [
    "Kumostat",
    "MonitoringConfig",
    "WirelessTag",
    "WirelessTagManager",
    "WirelessTagSensor",
]
