"""Entry point to the Wireless Tags cloud."""

import logging
from typing import Any, Callable, Dict, List, Optional

import aiohttp

from .config import PlatformConfig
from .const import (
    EVENT_CONNECT,
    EVENT_DISCONNECT,
    EVENT_DISCOVER,
    URL_GET_TAG_LIST,
    URL_GET_TAG_MANAGERS,
    URL_IS_SIGNED_IN,
    URL_SELECT_TAG_MANAGER,
    URL_SIGNIN,
    URL_SIGNOUT,
)
from .core.api_client import WirelessTagApiClient
from .core.events import EventSource
from .core.exceptions import WirelessTagException
from .entities.tag import WirelessTag
from .entities.tag_manager import Query, WirelessTagManager, create_filter

_LOGGER = logging.getLogger(__name__)


class WirelessTagPlatform(EventSource):
    """Account-level access: sign-in, tag managers and tag discovery.

    Events:
        ``connect`` (platform) after signing in
        ``disconnect`` (platform) after signing off
        ``discover`` (manager) when a tag manager is seen for the first time
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: Optional[PlatformConfig] = None,
        api_client: Optional[WirelessTagApiClient] = None,
    ) -> None:
        """Initialize the platform.

        Args:
            session: aiohttp client session; keeps the sign-in cookie
            config: Connection settings, defaults if omitted
            api_client: Client to use instead of one built from ``session``
        """
        super().__init__()
        self.config = config or PlatformConfig()
        self.api_client = api_client or WirelessTagApiClient(session, self.config)
        self._tag_managers: Dict[str, WirelessTagManager] = {}

    async def call_api(
        self, endpoint: str, body: Optional[Dict[str, Any]] = None, mac: Optional[str] = None
    ) -> Any:
        return await self.api_client.call_api(endpoint, body, mac=mac)

    async def signin(self, username: str, password: str) -> "WirelessTagPlatform":
        await self.call_api(URL_SIGNIN, {"email": username, "password": password})
        _LOGGER.info(f"Signed in to {self.config.base_url}")
        self.emit(EVENT_CONNECT, self)
        return self

    async def signoff(self) -> "WirelessTagPlatform":
        await self.call_api(URL_SIGNOUT, {})
        self.emit(EVENT_DISCONNECT, self)
        return self

    async def is_signed_in(self) -> bool:
        return bool(await self.call_api(URL_IS_SIGNED_IN, {}))

    async def discover_tag_managers(self, query: Query = None) -> List[WirelessTagManager]:
        """Find the account's tag managers, optionally filtered by ``query``.

        Known managers are refreshed in place. Without a query the set of
        known managers is replaced by the result.
        """
        result = await self.call_api(URL_GET_TAG_MANAGERS, {})
        matches = create_filter(query)
        managers = []
        for record in result or []:
            if not matches(record):
                continue
            manager = self._tag_managers.get(record.get("mac"))
            if manager is not None:
                manager.data = record
            else:
                manager = WirelessTagManager(self, record)
                self.emit(EVENT_DISCOVER, manager)
            managers.append(manager)
        if not query:
            self._tag_managers.clear()
        for manager in managers:
            self._tag_managers[manager.mac] = manager
        return managers

    def get_tag_manager(self, mac: str) -> Optional[WirelessTagManager]:
        return self._tag_managers.get(mac)

    async def find_tag_manager(self, mac: str) -> Optional[WirelessTagManager]:
        """Return the tag manager with the given MAC, discovering it if needed."""
        manager = self.get_tag_manager(mac)
        if manager is not None:
            return manager
        managers = await self.discover_tag_managers({"mac": mac})
        return managers[0] if managers else None

    def each_tag_manager(self, action: Optional[Callable[[WirelessTagManager], Any]] = None) -> List[Any]:
        managers = list(self._tag_managers.values())
        if action is None:
            return managers
        return [action(manager) for manager in managers]

    async def select_tag_manager(self, manager: WirelessTagManager) -> WirelessTagManager:
        """Make ``manager`` the account's selected tag manager."""
        if manager.selected:
            return manager
        await self.call_api(URL_SELECT_TAG_MANAGER, {"mac": manager.mac})
        for other in self._tag_managers.values():
            other.data["selected"] = False
        manager.data["selected"] = True
        return manager

    async def discover_tags(
        self, query: Query = None, manager_query: Query = None
    ) -> List[WirelessTag]:
        """Find tags across all tag managers.

        Args:
            query: Filter applied to tag records
            manager_query: Filter applied to tag managers

        Raises:
            WirelessTagException: If the tag list names an unknown tag manager
        """
        await self.discover_tag_managers(manager_query)
        manager_matches = create_filter(manager_query)
        result = await self.call_api(URL_GET_TAG_LIST, {})
        tags = []
        for record in result or []:
            manager = self.get_tag_manager(record.get("mac"))
            if not manager_matches(manager if manager is not None else record):
                continue
            if manager is None:
                raise WirelessTagException(f"tag manager {record.get('mac')} not found")
            tags.extend(manager.ingest_tags(record.get("tags") or [], query))
        return tags
