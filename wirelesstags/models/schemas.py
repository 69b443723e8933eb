"""Property schemas for sensors, monitoring configs, tags and thermostats.

Each table maps a schema key (usually a sensor type) to the properties an
entity of that kind exposes. A string entry aliases another entry.
"""

from typing import Any, Dict, List, Optional

from ..const import UNIT_CELSIUS, UNIT_FAHRENHEIT
from ..core.property_map import PropertySpec, SchemaTable
from ..core.xforms import (
    celsius_to_fahrenheit,
    enum_lookup,
    enum_values,
    from_native_temp,
    grouped_sub_object,
    identity,
    reverse_enum_lookup,
    rh_to_dew_point,
    round_prec,
    rounding,
    to_native_temp,
)

TAG_EVENT_STATES = {
    0: "Disarmed",
    1: "Armed",
    2: "Moved",
    3: "Opened",
    4: "Closed",
    5: "Event Detected",
    6: "Timed Out",
    7: "Stabilizing",
    8: "Carried Away",
    9: "In Free Fall",
}
TEMP_EVENT_STATES = {
    0: "Not Monitoring",
    1: "Normal",
    2: "Too Hot",
    3: "Too Cold",
}
HUMIDITY_EVENT_STATES = {
    0: "N.A.",
    1: "Not Monitoring",
    2: "Normal",
    3: "Too Dry",
    4: "Too Humid",
}
MOISTURE_EVENT_STATES = {
    0: "N.A.",
    1: "Not Monitoring",
    2: "Normal",
    3: "Too Dry",
    4: "Too Wet",
}
LIGHT_EVENT_STATES = {
    0: "N.A.",
    1: "Not Monitoring",
    2: "Normal",
    3: "Too Dark",
    4: "Too Bright",
}
MOTION_RESPONSIVENESS_STATES = {
    1: "Highest",
    2: "Medium high",
    3: "Medium",
    4: "Medium low",
    5: "Lowest",
}
CAP_RESPONSIVENESS_STATES = {
    4: "Highest",
    8: "Medium high",
    16: "Medium",
    32: "Medium low",
    48: "Lowest",
}
# oorGrace code -> seconds
OUT_OF_RANGE_GRACE_PERIODS = {
    0: 0,
    1: 120,
    2: 240,
    3: 360,
    4: 480,
    5: 600,
    6: 840,
    7: 1200,
    8: 1800,
}

# --- Sensor property transforms ---


def _temp_reading(value: Optional[float], sensor: Any) -> Optional[float]:
    if value is None:
        return None
    if sensor.monitoring_config().unit == UNIT_FAHRENHEIT:
        value = celsius_to_fahrenheit(value)
    return round_prec(value, 2 if sensor.wireless_tag.can_high_prec_temp() else 1)


def _water_state(shorted: Any, sensor: Any = None) -> str:
    return "Water Detected" if shorted else "Normal"


def _out_of_range_state(out_of_range: Any, sensor: Any = None) -> str:
    return "Out Of Range" if out_of_range else "Normal"


def _current_state(amp_data: Any, sensor: Any = None) -> Optional[str]:
    return amp_data.get("eventState") if amp_data else None


def _battery_state(enabled: Any, sensor: Any) -> str:
    if not enabled:
        return "Not Monitoring"
    threshold = sensor.data.get("LBTh")
    reading = sensor.reading
    if threshold is not None and reading is not None and reading >= threshold:
        return "Normal"
    return "Battery Low"


def _fixed_values(*values: str):
    def _values(sensor: Any = None) -> List[str]:
        return list(values)

    return _values


SENSOR_PROPERTIES: SchemaTable = {
    "motion": {},
    "event": {
        "reading": PropertySpec("eventState", enum_lookup(TAG_EVENT_STATES)),
        "event_state": PropertySpec("eventState", enum_lookup(TAG_EVENT_STATES)),
        "event_state_values": PropertySpec(None, enum_values(TAG_EVENT_STATES)),
    },
    "light": {
        "reading": PropertySpec("lux", rounding(2)),
        "event_state": PropertySpec("lightEventState", enum_lookup(LIGHT_EVENT_STATES)),
        "event_state_values": PropertySpec(None, enum_values(LIGHT_EVENT_STATES)),
    },
    "temp": {
        "reading": PropertySpec("temperature", _temp_reading),
        "event_state": PropertySpec("tempEventState", enum_lookup(TEMP_EVENT_STATES)),
        "event_state_values": PropertySpec(None, enum_values(TEMP_EVENT_STATES)),
    },
    "humidity": {
        "reading": PropertySpec("cap", identity),
        "event_state": PropertySpec("capEventState", enum_lookup(HUMIDITY_EVENT_STATES)),
        "event_state_values": PropertySpec(None, enum_values(HUMIDITY_EVENT_STATES)),
        "dew_point": PropertySpec("cap", rh_to_dew_point),
    },
    "moisture": {
        "reading": PropertySpec("cap", identity),
        "event_state": PropertySpec("capEventState", enum_lookup(MOISTURE_EVENT_STATES)),
        "event_state_values": PropertySpec(None, enum_values(MOISTURE_EVENT_STATES)),
    },
    "water": {
        "reading": PropertySpec("shorted", identity),
        "event_state": PropertySpec("shorted", _water_state),
        "event_state_values": PropertySpec(None, _fixed_values("Normal", "Water Detected")),
    },
    "current": {
        "reading": PropertySpec("ampData", identity),
        "event_state": PropertySpec("ampData", _current_state),
    },
    "battery": {
        "reading": PropertySpec("batteryVolt", rounding(2)),
        "event_state": PropertySpec("enLBN", _battery_state),
        "event_state_values": PropertySpec(
            None, _fixed_values("Not Monitoring", "Normal", "Battery Low")
        ),
    },
    "outofrange": {
        "reading": PropertySpec("OutOfRange", identity),
        "event_state": PropertySpec("OutOfRange", _out_of_range_state),
        "event_state_values": PropertySpec(None, _fixed_values("Normal", "Out Of Range")),
        "grace_period": PropertySpec(
            "oorGrace",
            enum_lookup(OUT_OF_RANGE_GRACE_PERIODS),
            reverse_enum_lookup(OUT_OF_RANGE_GRACE_PERIODS),
        ),
    },
    "signal": {
        "reading": PropertySpec("signaldBm", identity),
    },
}

# --- Monitoring config groups ---

NOTIFY_MAP = {
    "email": "email",
    "sound": "apnsSound",
    "pause_period": "apns_pause",  # minutes
    "use_email": "send_email",
    "use_twitter": "send_tweet",
    "use_push": "beep_pc",
    "use_speech": "beep_pc_tts",
    "no_sound": "beep_pc_vibrate",
    "repeat_until_reset": "beep_pc_loop",
    "repeat_every": "notify_every",  # seconds, battery only
    "on_become_dry": "notify_open",  # water only
}
NOTIFY_OUT_OF_RANGE_MAP = {
    "email": "email_oor",
    "sound": "apnsSound",
    "use_email": "send_email_oor",
    "use_push": "beep_pc_oor",
    "use_speech": "beep_pc_tts_oor",
    "no_sound": "beep_pc_vibrate_oor",
}
THRESHOLD_MAP = {
    "low_value": "th_low",
    "min_low_readings": "th_low_delay",
    "high_value": "th_high",
    "min_high_readings": "th_high_delay",
    "hysteresis": "th_window",
}
LIGHT_THRESHOLD_MAP = {
    "low_value": "lux_th_low",
    "min_low_readings": "th_low_delay",
    "high_value": "lux_th_high",
    "min_high_readings": "th_high_delay",
    "hysteresis": "lux_th_window",
}
BATTERY_THRESHOLD_MAP = {
    "low_value": "threshold",
}
CAPACITANCE_CALIBRATION_MAP = {
    "low_value": "cal1",
    "low_capacitance": "calRaw1",
    "high_value": "cal2",
    "high_capacitance": "calRaw2",
}
DOOR_MODE_MAP = {
    "angle": "door_mode_angle",  # degrees
    "notify_when_open_for": "door_mode_delay",  # seconds
    "notify_on_closed": "send_email_on_close",
}
MOTION_MODE_MAP = {
    "timeout_or_reset_after": "auto_reset_delay",  # seconds
    "timeout_mode": "hmc_timeout_mode",
}
ORIENTATION_MAP_1 = {"x": "az_x", "y": "az_y", "z": "az_z"}
ORIENTATION_MAP_2 = {"x": "az2_x", "y": "az2_y", "z": "az2_z"}

TEMP_ABSOLUTE = (from_native_temp(False), to_native_temp(False))
TEMP_RELATIVE = (from_native_temp(True), to_native_temp(True))


def _unit_from_raw(code: Any, config: Any = None) -> Optional[str]:
    if code is None:
        return None
    return UNIT_CELSIUS if code == 0 else UNIT_FAHRENHEIT


def _unit_to_raw(unit: str, config: Any = None) -> int:
    if unit == UNIT_CELSIUS:
        return 0
    if unit == UNIT_FAHRENHEIT:
        return 1
    raise ValueError(f"unrecognized unit {unit!r}")


def _read_write(source_key: str) -> PropertySpec:
    return PropertySpec(source_key, identity, identity)


def _notify_settings(key_map: Dict[str, str] = NOTIFY_MAP) -> PropertySpec:
    return grouped_sub_object("notify_settings", key_map)


MONITORING_PROPERTIES: SchemaTable = {
    "motion": {
        "notify_settings": _notify_settings(),
        "sensitivity": _read_write("sensitivity"),
        "responsiveness": PropertySpec("interval", enum_lookup(MOTION_RESPONSIVENESS_STATES)),
        "is_door_mode": _read_write("door_mode"),
        "door_mode": grouped_sub_object("door_mode", DOOR_MODE_MAP),
        "motion_mode": grouped_sub_object("motion_mode", MOTION_MODE_MAP),
        "orientation1": grouped_sub_object("orientation1", ORIENTATION_MAP_1),
        "orientation2": grouped_sub_object("orientation2", ORIENTATION_MAP_2),
        "arm_silently": _read_write("silent_arming"),
    },
    # overlaid on motion for tags with an accelerometer
    "accelerometer": {
        "sensitivity": _read_write("sensitivity2"),
    },
    "event": "motion",
    "light": {
        "notify_settings": _notify_settings(),
        "thresholds": grouped_sub_object("thresholds", LIGHT_THRESHOLD_MAP),
        "monitoring_interval": _read_write("th_monitor_interval"),  # seconds
        "beep_tag": _read_write("beep_tag"),
    },
    "temp": {
        "notify_settings": _notify_settings(),
        "thresholds": grouped_sub_object(
            "thresholds",
            THRESHOLD_MAP,
            {
                "low_value": TEMP_ABSOLUTE,
                "high_value": TEMP_ABSOLUTE,
                "hysteresis": TEMP_RELATIVE,
            },
        ),
        "monitoring_interval": _read_write("interval"),  # seconds
        "unit": PropertySpec("temp_unit", _unit_from_raw, _unit_to_raw),
        "threshold_quantization": _read_write("threshold_q"),
    },
    "humidity": {
        "notify_settings": _notify_settings(),
        "thresholds": grouped_sub_object("thresholds", THRESHOLD_MAP),
        "responsiveness": PropertySpec(
            "interval",
            enum_lookup(CAP_RESPONSIVENESS_STATES),
            reverse_enum_lookup(CAP_RESPONSIVENESS_STATES),
        ),
        "calibration": grouped_sub_object("calibration", CAPACITANCE_CALIBRATION_MAP),
    },
    "moisture": "humidity",
    "water": {
        "notify_settings": _notify_settings(),
    },
    "current": {
        "notify_settings": _notify_settings(),
        "thresholds": grouped_sub_object("thresholds", THRESHOLD_MAP),
        "sampling_period": _read_write("sampling_period"),
        "responsiveness": PropertySpec(
            "interval",
            enum_lookup(CAP_RESPONSIVENESS_STATES),
            reverse_enum_lookup(CAP_RESPONSIVENESS_STATES),
        ),
    },
    "battery": {
        "notify_settings": _notify_settings(),
        "thresholds": grouped_sub_object("thresholds", BATTERY_THRESHOLD_MAP),
        "monitoring_enabled": _read_write("enabled"),
    },
    "outofrange": {
        "notify_settings": _notify_settings(NOTIFY_OUT_OF_RANGE_MAP),
    },
}

# --- Tag and thermostat records ---

TAG_PROPERTIES: SchemaTable = {
    "tag": {
        "uuid": PropertySpec("uuid", identity),
        "slave_id": PropertySpec("slaveId", identity),
        "tag_type": PropertySpec("tagType", identity),
        "alive": PropertySpec("alive", identity),
        "rev": PropertySpec("rev", identity),
        "name": _read_write("name"),
        "update_interval": _read_write("postBackInterval"),  # seconds
        "low_power_mode": _read_write("rssiMode"),
    },
}


def _negate(value: Any, owner: Any = None) -> Optional[bool]:
    return None if value is None else not value


THERMOSTAT_PROPERTIES: SchemaTable = {
    "thermostat": {
        "is_fan_on": PropertySpec("fanOn", identity),
        "is_ac_heat_on": PropertySpec("turnOff", _negate),
        "threshold_low": PropertySpec("th_low", *TEMP_ABSOLUTE),
        "threshold_high": PropertySpec("th_high", *TEMP_ABSOLUTE),
        "use_home_away": PropertySpec("disableLocal", _negate),
        "temp_tag_uuid": _read_write("targetUuid"),
    },
}
