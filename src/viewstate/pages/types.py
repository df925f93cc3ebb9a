"""Capability set for pages whose state lives in the URL and session storage.

A page opts in by providing the attributes and the three pure functions of
``PageWithSessionAndUrlState``; any class with those members qualifies.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from viewstate.navigation import NavigationManager
from viewstate.storage import StorageResult


@dataclass(frozen=True, slots=True)
class UrlState:
    """A relative URL split into its path and query parameters.

    A ``None`` parameter value means the parameter is absent from the URL.

    Attributes:
        path: Relative path (e.g. ``Metrics/frontend`` or ``/Metrics``).
        query_parameters: Parameters to append, or ``None`` for none.
    """

    path: str
    query_parameters: Mapping[str, str | None] | None = None


class SessionStore(Protocol):
    """Async key-value store scoped to one browser session."""

    async def get_async[T](self, key: str, cls: type[T] | None = None) -> StorageResult[T]: ...

    async def set_async(self, key: str, value: Any) -> None: ...


class PageWithSessionAndUrlState[TViewModel, TSerializable](Protocol):
    """A page that keeps its state both in the URL and in session storage.

    Navigating back to the page restores the previous page state.

    Attributes:
        base_path: Base relative path of the page (``Metrics`` for
            ``/Metrics``).
        session_storage_key: Key the serializable state is saved under.
        serializable_type: Type the stored snapshot is rebuilt into.
        navigation_manager: Current location and navigation.
        session_storage: Where snapshots are persisted.
        view_model: The live state.  Must be set before initialization.

    Usage::

        class MetricsPage:
            base_path = "Metrics"
            session_storage_key = "Metrics_PageState"
            serializable_type = MetricsPageState

            def update_view_model_from_query(self, view_model): ...
            def get_url_from_serializable_view_model(self, serializable): ...
            def convert_view_model_to_serializable(self): ...
    """

    base_path: str
    session_storage_key: str
    serializable_type: type[TSerializable]
    navigation_manager: NavigationManager
    session_storage: SessionStore
    view_model: TViewModel | None

    def update_view_model_from_query(self, view_model: TViewModel) -> None:
        """Populate *view_model* from the current query parameters.

        Missing parameters fall back to defaults instead of raising.
        """
        ...

    def get_url_from_serializable_view_model(self, serializable: TSerializable) -> UrlState:
        """Translate a serializable snapshot to the relative URL of that state."""
        ...

    def convert_view_model_to_serializable(self) -> TSerializable:
        """Project the view model onto a snapshot of simple types."""
        ...


class LifecyclePage(Protocol):
    """Explicit lifecycle entry points invoked by a page host."""

    async def initialize(self) -> None: ...

    async def after_first_render(self) -> None: ...

    async def dispose(self) -> None: ...