"""Data models for the Wireless Tags client library.

This package contains the sensor type registry and property schemas.
"""

from .sensor_type import SENSOR_API_SPECS, ApiSpec, SensorType

__all__ = [
    "ApiSpec",
    "SENSOR_API_SPECS",
    "SensorType",
]
