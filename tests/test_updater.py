"""Tests for the timed tag updater."""

from __future__ import annotations

import asyncio

import pytest

from wirelesstags import TimedTagUpdater


@pytest.mark.asyncio
async def test_updater_follows_running_state(motion_tag, kumostat_tag):
    """Test tags update only while the updater runs and they are registered."""
    updater = TimedTagUpdater().add_tags(motion_tag)
    assert not motion_tag.is_update_loop_running()

    updater.start_update_loop()
    assert updater.is_running()
    assert motion_tag.is_update_loop_running()

    updater.add_tags([kumostat_tag])
    assert kumostat_tag.is_update_loop_running()

    updater.remove_tags(motion_tag)
    assert not motion_tag.is_update_loop_running()
    assert updater.tags == [kumostat_tag]

    updater.stop_update_loop()
    assert not updater.is_running()
    assert not kumostat_tag.is_update_loop_running()
    await asyncio.sleep(0)


def test_updater_not_running_leaves_tags_alone(motion_tag):
    updater = TimedTagUpdater()
    updater.add_tags([motion_tag]).remove_tags([motion_tag])
    updater.stop_update_loop()
    assert updater.tags == []
    assert not motion_tag.is_update_loop_running()
