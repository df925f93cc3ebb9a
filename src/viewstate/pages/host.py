"""Page host — drives page lifecycles the way a UI framework would.

The host constructs a page, calls ``initialize()``, and watches the
navigation manager while it runs.  Initialization that navigated (a
restore from session storage) means the page is stale: the host disposes
it and constructs a fresh page at the new location.  Only a page whose
initialization settled without navigating reaches
``after_first_render()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from typing import Any

from viewstate.config import ViewStateConfig
from viewstate.errors import NavigationError
from viewstate.navigation import LocationChangedEvent, NavigationManager
from viewstate.pages.types import LifecyclePage, SessionStore
from viewstate.storage import ProtectedSessionStorage

logger = logging.getLogger("viewstate.pages")

type PageFactory[P: LifecyclePage] = Callable[[NavigationManager, SessionStore], P]


class PageHost[P: LifecyclePage]:
    """Construct, initialize and re-enter pages for one browser session.

    Usage::

        host = PageHost(nav, storage, lambda nav, storage: ConsoleLogsPage(nav, storage, service))
        page = await host.load("ConsoleLogs")
    """

    __slots__ = ("_config", "_factory", "_navigation", "_storage")

    def __init__(
        self,
        navigation_manager: NavigationManager,
        session_storage: SessionStore,
        factory: PageFactory[P],
        *,
        config: ViewStateConfig | None = None,
    ) -> None:
        self._navigation = navigation_manager
        self._storage = session_storage
        self._factory = factory
        self._config = config or ViewStateConfig()

    @classmethod
    def from_config(
        cls,
        config: ViewStateConfig,
        session: MutableMapping[str, Any],
        factory: PageFactory[P],
    ) -> PageHost[P]:
        """Build a host with a fresh navigation manager over *session*."""
        return cls(
            NavigationManager(config.base_uri),
            ProtectedSessionStorage.from_config(session, config),
            factory,
            config=config,
        )

    @property
    def navigation_manager(self) -> NavigationManager:
        return self._navigation

    @property
    def session_storage(self) -> SessionStore:
        return self._storage

    async def load(self, uri: str | None = None) -> P:
        """Open the page at *uri* (or the current location) and return it.

        Raises:
            NavigationError: If initialization keeps redirecting past
                ``ViewStateConfig.max_redirects``.
        """
        if uri is not None:
            self._navigation.navigate_to(uri)

        redirects = 0
        while True:
            page, location = await self._initialize_page()
            if location is None:
                break

            await page.dispose()
            redirects += 1
            if redirects > self._config.max_redirects:
                msg = (
                    f"Page initialization redirected more than "
                    f"{self._config.max_redirects} times (last: {location})."
                )
                raise NavigationError(msg)
            logger.debug("Page initialization redirected to %s", location)

        logger.debug("Loaded %s at %s", type(page).__name__, self._navigation.uri)
        await page.after_first_render()
        return page

    async def _initialize_page(self) -> tuple[P, str | None]:
        """Construct and initialize one page; return where it navigated, if anywhere."""
        locations: list[str] = []

        def on_location_changed(event: LocationChangedEvent) -> None:
            locations.append(event.location)

        page = self._factory(self._navigation, self._storage)
        self._navigation.add_location_changed_listener(on_location_changed)
        try:
            await page.initialize()
        finally:
            self._navigation.remove_location_changed_listener(on_location_changed)

        return page, locations[-1] if locations else None
