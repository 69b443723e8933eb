"""Minimal event emitter shared by platform, tag managers, tags and sensors."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

_LOGGER = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventSource:
    """Synchronous publish/subscribe for named events."""

    def __init__(self, *args, **kwargs) -> None:
        self._listeners: Dict[str, List[Listener]] = {}
        super().__init__(*args, **kwargs)

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Subscribe to ``event``.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.setdefault(event, []).append(listener)

        def _remove() -> None:
            self.remove_listener(event, listener)

        return _remove

    def remove_listener(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> None:
        """Call every listener of ``event`` with ``args``.

        A failing listener is logged and does not stop the others.
        """
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(*args)
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Error in %s listener %r", event, listener)
