"""Tag manager entity."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..const import EVENT_DISCOVER, URL_GET_TAG_LIST
from ..core.events import EventSource
from ..core.exceptions import WirelessTagException
from ..core.property_map import MappedPropertiesMixin, PropertySpec
from ..core.xforms import identity
from .tag import WirelessTag

_LOGGER = logging.getLogger(__name__)

Query = Union[None, Mapping[str, Any], Callable[[Any], bool]]

_MANAGER_PROPERTIES = {
    "manager": {
        "mac": PropertySpec("mac", identity),
        "radio_id": PropertySpec("radioId", identity),
        "rev": PropertySpec("rev", identity),
        "wireless_config": PropertySpec("wirelessConfig", identity),
        "online": PropertySpec("online", identity),
        "selected": PropertySpec("selected", identity),
        "dbid": PropertySpec("dbid", identity),
        "name": PropertySpec("name", identity, identity),
    },
}


def create_filter(query: Query) -> Callable[[Any], bool]:
    """Build a predicate from a query.

    A mapping matches records whose raw keys equal all of its values; a
    callable is used as is; an empty query matches everything.
    """
    if not query:
        return lambda record: True
    if callable(query):
        return query

    def _matches(record: Any) -> bool:
        data = record.data if hasattr(record, "data") else record
        return all(key in data and data[key] == value for key, value in query.items())

    return _matches


class WirelessTagManager(MappedPropertiesMixin, EventSource):
    """A tag manager under the signed-in account.

    Events:
        ``discover`` (tag) when a tag is seen for the first time
    """

    def __init__(self, platform: Any, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__()
        self.wireless_tag_platform = platform
        self.data: Dict[str, Any] = data or {}
        self._tags: Dict[str, WirelessTag] = {}
        self.bind_properties(_MANAGER_PROPERTIES, "manager")

    @property
    def wireless_tags(self) -> List[WirelessTag]:
        return list(self._tags.values())

    def get_tag(self, uuid: str) -> Optional[WirelessTag]:
        return self._tags.get(uuid)

    async def call_api(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Call the API on behalf of this tag manager.

        The call is routed by MAC unless this is the only, selected manager.
        """
        platform = self.wireless_tag_platform
        mac = None
        if not self.selected or len(platform.each_tag_manager()) > 1:
            mac = self.mac
        return await platform.call_api(endpoint, body, mac=mac)

    async def discover_tags(self, query: Query = None) -> List[WirelessTag]:
        """Find the tags of this manager, optionally filtered by ``query``.

        Known tags are refreshed in place.

        Raises:
            WirelessTagException: If the tag list has no single entry for this manager
        """
        result = await self.wireless_tag_platform.call_api(URL_GET_TAG_LIST, {})
        records = [rec for rec in result or [] if rec.get("mac") == self.mac]
        if len(records) != 1:
            raise WirelessTagException(f"{len(records)} result(s) for tag manager {self.mac}")
        return self.ingest_tags(records[0].get("tags") or [], query)

    def ingest_tags(self, tag_records: Iterable[Dict[str, Any]], query: Query = None) -> List[WirelessTag]:
        """Create or refresh tag objects from raw tag records."""
        matches = create_filter(query)
        tags = []
        for record in tag_records:
            if not matches(record):
                continue
            tag = self._tags.get(record.get("uuid"))
            if tag is not None:
                tag.data = record
            else:
                tag = WirelessTag(self, record)
                self._tags[tag.uuid] = tag
                self.emit(EVENT_DISCOVER, tag)
            tags.append(tag)
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Tag manager %s: %d tag(s) matched", self.mac, len(tags))
        return tags

    async def select(self) -> "WirelessTagManager":
        return await self.wireless_tag_platform.select_tag_manager(self)

    def __repr__(self) -> str:
        return f"<WirelessTagManager {self.name!r} mac={self.mac}>"
