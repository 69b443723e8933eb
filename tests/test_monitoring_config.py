"""Tests for monitoring configs."""

from __future__ import annotations

import pytest

from wirelesstags.core.exceptions import OperationUnsupportedError
from wirelesstags.entities.monitoring_config import MonitoringConfig


def test_empty_config_defaults():
    """Test a detached config reads as empty."""
    config = MonitoringConfig("temp")
    assert config.data == {}
    assert config.unit is None
    assert config.is_modified() is False
    assert config.thresholds.low_value is None


def test_mark_all_modified(temp_config_data):
    """Test marking without a key marks every property and raw key."""
    config = MonitoringConfig("temp", temp_config_data)
    config.mark_modified()
    for name in config.mapped_property_names():
        assert config.is_modified(name)
    for key in temp_config_data:
        assert config.is_modified(key)


def test_mark_all_on_empty_config():
    """Test an empty config still reports modified after marking all."""
    config = MonitoringConfig("water")
    config.mark_modified()
    assert config.is_modified()


def test_reset_modified(temp_config_data):
    """Test reset clears every mark."""
    config = MonitoringConfig("temp", temp_config_data)
    config.mark_modified()
    config.reset_modified()
    assert config.is_modified() is False
    for key in temp_config_data:
        assert config.is_modified(key) is False


def test_mark_unknown_field():
    """Test marking a field the config doesn't have raises KeyError."""
    config = MonitoringConfig("temp")
    with pytest.raises(KeyError):
        config.mark_modified("no_such_field")


def test_mark_group_marks_leaves():
    config = MonitoringConfig("temp")
    config.mark_modified("thresholds")
    assert config.is_modified("thresholds.low_value")
    assert config.is_modified("th_window")
    assert not config.is_modified("interval")


def test_thresholds_in_fahrenheit(temp_config_data):
    """Test thresholds convert through the configured unit."""
    config = MonitoringConfig("temp", temp_config_data)
    assert config.unit == "degF"
    assert config.thresholds.low_value == pytest.approx(50.0)
    assert config.thresholds.hysteresis == pytest.approx(1.8)
    assert config.thresholds.min_low_readings == 2

    config.thresholds.low_value = 68.0
    assert config.data["th_low"] == pytest.approx(20.0)
    assert config.is_modified("th_low")
    assert config.is_modified("thresholds.low_value")
    assert not config.is_modified("th_high")


def test_thresholds_follow_unit_change(temp_config_data):
    config = MonitoringConfig("temp", temp_config_data)
    config.unit = "degC"
    assert config.data["temp_unit"] == 0
    assert config.thresholds.low_value == 10.0
    assert config.is_modified("unit")
    assert config.is_modified("temp_unit")


def test_unit_rejects_unknown():
    config = MonitoringConfig("temp")
    with pytest.raises(ValueError):
        config.unit = "degK"


def test_notify_settings_group(temp_config_data):
    config = MonitoringConfig("temp", temp_config_data)
    assert config.notify_settings.email == "someone@example.com"
    assert config.notify_settings.use_email is True
    config.notify_settings.use_push = True
    assert config.data["beep_pc"] is True
    assert config.is_modified("notify_settings.use_push")


def test_moisture_aliases_humidity():
    """Test moisture configs expose the humidity settings."""
    config = MonitoringConfig("moisture", {"interval": 16, "cal1": 10})
    assert config.responsiveness == "Medium"
    assert config.calibration.low_value == 10
    config.responsiveness = "Lowest"
    assert config.data["interval"] == 48


def test_motion_responsiveness_is_read_only():
    config = MonitoringConfig("event", {"interval": 3})
    assert config.responsiveness == "Medium"
    with pytest.raises(AttributeError):
        config.responsiveness = "Lowest"


def test_accelerometer_overlay(motion_tag):
    """Test tags with an accelerometer map sensitivity to its own key."""
    motion_tag.data["rev"] = 0x1A
    sensor = motion_tag.sensor("event")
    config = MonitoringConfig.create(sensor, {"sensitivity": 50, "sensitivity2": 80})
    assert config.sensitivity == 80


def test_no_accelerometer_overlay(motion_tag):
    sensor = motion_tag.sensor("event")
    config = MonitoringConfig.create(sensor, {"sensitivity": 50, "sensitivity2": 80})
    assert config.sensitivity == 50


def test_grace_period_delegates_to_sensor(motion_tag):
    """Test the out-of-range grace period writes through to the tag."""
    sensor = motion_tag.sensor("outofrange")
    config = sensor.monitoring_config()
    assert config.grace_period == 240
    config.grace_period = 600
    assert motion_tag.data["oorGrace"] == 5
    assert sensor.grace_period == 600
    assert config.is_modified("grace_period")
    with pytest.raises(ValueError):
        config.grace_period = 250


@pytest.mark.asyncio
async def test_save_grace_period_then_config(motion_tag, call_api, endpoints_called):
    """Test a modified grace period is saved before the config itself."""
    sensor = motion_tag.sensor("outofrange")
    config = sensor.monitoring_config()
    config.data = {"__type": "MyTagList.OutOfRangeConfig", "send_email_oor": False}
    updated = dict(motion_tag.data, oorGrace=2)
    call_api.side_effect = [updated, None]
    events = []
    sensor.on("config", lambda *args: events.append(args))

    config.grace_period = 240
    await config.save()

    assert endpoints_called(call_api) == ["SetOutOfRangeGrace", "SaveOutOfRangeConfig2"]
    grace_body = call_api.await_args_list[0].args[1]
    assert grace_body == {"id": 1, "oorGrace": 2, "applyAll": False}
    save_body = call_api.await_args_list[1].args[1]
    assert save_body == {
        "id": 1,
        "config": {"send_email_oor": False},
        "applyAll": False,
        "allMac": False,
    }
    assert motion_tag.data is updated
    assert config.is_modified() is False
    assert events == [(sensor, config, "save")]


@pytest.mark.asyncio
async def test_save_sends_config_without_type(motion_tag, call_api, temp_config_data):
    sensor = motion_tag.sensor("temp")
    config = MonitoringConfig.create(sensor, temp_config_data)
    config.monitoring_interval = 600
    await config.save(apply_all=True)

    endpoint, body = call_api.await_args.args
    assert endpoint.endswith("/SaveTempSensorConfig2")
    assert "__type" not in body["config"]
    assert body["config"]["interval"] == 600
    assert body["applyAll"] is True
    assert body["allMac"] is False


@pytest.mark.asyncio
async def test_save_unmodified_is_noop(motion_tag, call_api):
    config = motion_tag.sensor("temp").monitoring_config()
    assert await config.save() is config
    call_api.assert_not_awaited()


@pytest.mark.asyncio
async def test_detached_config_save_and_update_are_noops():
    config = MonitoringConfig("temp", {"interval": 60})
    config.mark_modified("interval")
    assert await config.save() is config
    config.reset_modified()
    assert await config.update() is config
    assert config.data == {"interval": 60}


@pytest.mark.asyncio
async def test_save_unsupported_before_io(motion_tag, call_api):
    """Test configs without a save endpoint fail before any call."""
    sensor = motion_tag.sensor("signal")
    config = MonitoringConfig.create(sensor, {"x": 1})
    config.mark_modified()
    with pytest.raises(OperationUnsupportedError):
        await config.save()
    call_api.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_unwraps_payload_key(motion_tag, call_api):
    """Test humidity configs are read from the rhEvent envelope."""
    sensor = motion_tag.sensor("humidity")
    call_api.return_value = {"rhEvent": {"interval": 4, "th_low": 30}}
    events = []
    sensor.on("config", lambda *args: events.append(args[2]))

    config = await sensor.monitoring_config().update()

    endpoint, body = call_api.await_args.args
    assert endpoint.endswith("/LoadCapSensorConfig2")
    assert body == {"id": 1}
    assert config.responsiveness == "Highest"
    assert config.thresholds.low_value == 30
    assert events == ["update"]


@pytest.mark.asyncio
async def test_update_skipped_with_unsaved_changes(motion_tag, call_api, temp_config_data):
    sensor = motion_tag.sensor("temp")
    config = sensor.monitoring_config(MonitoringConfig.create(sensor, temp_config_data))
    config.threshold_quantization = 0.1
    await config.update()
    call_api.assert_not_awaited()
    assert config.data["threshold_q"] == 0.1


def test_set_config_emits_only_on_change(motion_tag, temp_config_data):
    """Test replacing the config emits set when the data differ."""
    sensor = motion_tag.sensor("temp")
    actions = []
    sensor.on("config", lambda s, c, action: actions.append(action))

    sensor.monitoring_config(MonitoringConfig.create(sensor, temp_config_data))
    sensor.monitoring_config(MonitoringConfig.create(sensor, dict(temp_config_data)))
    assert actions == ["set"]


def test_as_dict(temp_config_data):
    config = MonitoringConfig("temp", temp_config_data)
    values = config.as_dict()
    assert values["unit"] == "degF"
    assert values["thresholds"]["high_value"] == pytest.approx(86.0)
    assert values["monitoring_interval"] == 300


def test_unknown_sensor_type():
    with pytest.raises(ValueError):
        MonitoringConfig("barometer")


@pytest.mark.asyncio
async def test_save_before_load_is_noop(motion_tag, call_api):
    """Test edits to a never-loaded config are not sent over the stored record."""
    config = motion_tag.sensor("temp").monitoring_config()
    assert config.is_loaded() is False
    config.monitoring_interval = 600
    assert config.is_modified()

    assert await config.save() is config

    call_api.assert_not_awaited()
    assert config.is_modified("interval")


@pytest.mark.asyncio
async def test_save_after_load(motion_tag, call_api, temp_config_data, endpoints_called):
    config = motion_tag.sensor("temp").monitoring_config()
    call_api.return_value = temp_config_data
    await config.update()
    assert config.is_loaded()

    config.monitoring_interval = 600
    await config.save()
    assert endpoints_called(call_api) == ["LoadTempSensorConfig", "SaveTempSensorConfig2"]


def test_mark_all_on_empty_config_only_marks_itself():
    """Test the catch-all mark does not make unrelated keys modified."""
    config = MonitoringConfig("signal")
    config.mark_modified()
    assert config.is_modified()
    assert config.is_modified("no_such_field") is False
