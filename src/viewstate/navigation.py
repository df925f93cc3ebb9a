"""Navigation manager — the current location of a page session.

Holds the application's base URI and the current absolute URI, resolves
relative targets against the base, and notifies listeners whenever the
location changes.  A page host listens for those changes to detect that
initialization redirected and the page must be constructed again.

Usage::

    from viewstate.navigation import NavigationManager

    nav = NavigationManager("https://dashboard.local/", "https://dashboard.local/Metrics")
    nav.to_base_relative_path(nav.uri)   # "Metrics"
    nav.navigate_to("Metrics/frontend")
    nav.uri                              # "https://dashboard.local/Metrics/frontend"
"""

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

from viewstate.errors import ConfigurationError, NavigationError
from viewstate.http.query import QueryParams

logger = logging.getLogger("viewstate.navigation")


@dataclass(frozen=True, slots=True)
class LocationChangedEvent:
    """Delivered to listeners after the location changed.

    Attributes:
        location: The new absolute URI.
    """

    location: str


type LocationChangedListener = Callable[[LocationChangedEvent], None]


class NavigationManager:
    """Current location plus programmatic navigation within a base URI."""

    __slots__ = ("_base_uri", "_history", "_listeners", "_uri")

    def __init__(self, base_uri: str, uri: str | None = None) -> None:
        parts = urlsplit(base_uri)
        if not parts.scheme or not parts.netloc:
            msg = f"base_uri must be an absolute URI, got {base_uri!r}."
            raise ConfigurationError(msg)
        if not base_uri.endswith("/"):
            base_uri += "/"

        self._base_uri = base_uri
        self._listeners: list[LocationChangedListener] = []
        self._uri = self._resolve(uri) if uri is not None else base_uri
        self._history: list[str] = [self._uri]

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def history(self) -> tuple[str, ...]:
        """Every location visited, oldest first."""
        return tuple(self._history)

    @property
    def path(self) -> str:
        """Base-relative path of the current URI, without query or fragment."""
        relative = self.to_base_relative_path(self._uri)
        return relative.split("#", 1)[0].split("?", 1)[0]

    @property
    def query(self) -> QueryParams:
        """Query parameters of the current URI."""
        return QueryParams(urlsplit(self._uri).query)

    def to_absolute_uri(self, relative: str) -> str:
        """Resolve *relative* against the base URI."""
        return urljoin(self._base_uri, relative)

    def to_base_relative_path(self, uri: str) -> str:
        """Return the part of *uri* that follows the base URI.

        Query string and fragment are kept, so ``Metrics?x=1`` is not the
        same relative path as ``Metrics``.  The base URI without its
        trailing slash maps to ``""``.

        Raises:
            NavigationError: If *uri* is not within the base URI.
        """
        if uri.startswith(self._base_uri):
            return uri[len(self._base_uri) :]
        if uri == self._base_uri[:-1]:
            return ""
        msg = f"The URI {uri!r} is not contained by the base URI {self._base_uri!r}."
        raise NavigationError(msg)

    def navigate_to(self, uri: str) -> None:
        """Move to *uri* and notify location listeners.

        *uri* may be absolute or relative to the base URI.

        Raises:
            NavigationError: If the target resolves outside the base URI.
        """
        target = self._resolve(uri)
        logger.debug("Navigating from %s to %s", self._uri, target)

        self._uri = target
        self._history.append(target)

        event = LocationChangedEvent(location=target)
        for listener in tuple(self._listeners):
            listener(event)

    def add_location_changed_listener(self, listener: LocationChangedListener) -> None:
        self._listeners.append(listener)

    def remove_location_changed_listener(self, listener: LocationChangedListener) -> None:
        """Stop notifying *listener*.  Unknown listeners are ignored."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def _resolve(self, uri: str) -> str:
        target = self.to_absolute_uri(uri)
        # Validates the target; the relative part itself is not needed.
        self.to_base_relative_path(target)
        return target
