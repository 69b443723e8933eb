"""Keep a set of tags updated through their own auto-update loops."""

import logging
from typing import Dict, Iterable, Union

from .entities.tag import WirelessTag

_LOGGER = logging.getLogger(__name__)

Tags = Union[WirelessTag, Iterable[WirelessTag]]


def _as_list(tags: Tags):
    if isinstance(tags, WirelessTag):
        return [tags]
    return list(tags)


class TimedTagUpdater:
    """Updates registered tags on the schedule of their update intervals.

    Tags added while the updater runs start updating right away; removed
    tags stop.
    """

    def __init__(self) -> None:
        self._tags: Dict[str, WirelessTag] = {}
        self._running = False

    @property
    def tags(self):
        return list(self._tags.values())

    def is_running(self) -> bool:
        return self._running

    def add_tags(self, tags: Tags) -> "TimedTagUpdater":
        for tag in _as_list(tags):
            if self._running:
                tag.start_update_loop()
            self._tags[tag.uuid] = tag
        return self

    def remove_tags(self, tags: Tags) -> "TimedTagUpdater":
        for tag in _as_list(tags):
            if self._running:
                tag.stop_update_loop()
            self._tags.pop(tag.uuid, None)
        return self

    def start_update_loop(self) -> "TimedTagUpdater":
        """Start updating all registered tags. Requires a running event loop."""
        if self._running:
            return self
        self._running = True
        for tag in self._tags.values():
            tag.start_update_loop()
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Started updating %d tags", len(self._tags))
        return self

    def stop_update_loop(self) -> "TimedTagUpdater":
        if self._running:
            self._running = False
            for tag in self._tags.values():
                tag.stop_update_loop()
        return self
