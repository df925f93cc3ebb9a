"""Console logs page — select a resource and watch its console output.

The selected resource lives in the URL (``ConsoleLogs/{resource}``) and
in session storage, so returning to ``/ConsoleLogs`` reopens the last
resource.  Resource changes arrive over the resource service
subscription; deleting the selected resource clears the selection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote, unquote

import anyio
from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectReceiveStream

from viewstate.navigation import NavigationManager
from viewstate.pages.state import after_view_model_changed, initialize_view_model
from viewstate.pages.types import SessionStore, UrlState
from viewstate.resources import (
    InMemoryResourceService,
    ResourceChange,
    ResourceChangeType,
    ResourceViewModel,
    get_resource_name,
)

logger = logging.getLogger("viewstate.pages")

SELECT_A_RESOURCE = "(Select a resource)"
UNKNOWN_STATE = "Unknown state"
STATUS_NO_RESOURCE_SELECTED = "No resource selected"
STATUS_LOGS_NOT_YET_AVAILABLE = "Logs not yet available"
STATUS_FAILED_TO_INITIALIZE = "Failed to initialize"
STATUS_WATCHING_LOGS = "Watching logs..."
STATUS_FINISHED_WATCHING_LOGS = "Finished watching logs"


@dataclass(slots=True)
class SelectOption:
    """An entry of the resource picker; ``value`` is ``None`` for no selection."""

    value: str | None
    text: str


@dataclass(slots=True)
class ConsoleLogsViewModel:
    status: str
    selected_resource: ResourceViewModel | None
    selected_option: SelectOption | None = None
    initialised_successfully: bool | None = None


@dataclass(slots=True)
class ConsoleLogsPageState:
    selected_resource: str | None = None


class ConsoleLogsPage:
    """Page state for the console logs view.

    Implements ``PageWithSessionAndUrlState`` and the page host lifecycle.
    Pass a task group to watch resource changes in the background;
    without one, feed changes to ``on_resource_changed`` directly.
    """

    base_path = "ConsoleLogs"
    session_storage_key = "ConsoleLogs_PageState"
    serializable_type = ConsoleLogsPageState

    def __init__(
        self,
        navigation_manager: NavigationManager,
        session_storage: SessionStore,
        resource_service: InMemoryResourceService,
        *,
        task_group: TaskGroup | None = None,
    ) -> None:
        self.navigation_manager = navigation_manager
        self.session_storage = session_storage
        self.resource_service = resource_service
        self._task_group = task_group

        self._no_selection = SelectOption(value=None, text=SELECT_A_RESOURCE)
        # Keyed by casefolded name; resource names compare case-insensitively.
        self._resource_by_name: dict[str, ResourceViewModel] = {}
        self._resources: list[SelectOption] | None = None
        self._subscription: MemoryObjectReceiveStream[ResourceChange] | None = None
        self._watch_scope: anyio.CancelScope | None = None
        self._rendered = False

        self.log_subscription: MemoryObjectReceiveStream[str] | None = None
        self.view_model: ConsoleLogsViewModel | None = ConsoleLogsViewModel(
            status=STATUS_NO_RESOURCE_SELECTED,
            selected_resource=None,
            selected_option=self._no_selection,
        )

    @property
    def resource_name(self) -> str | None:
        """Resource name from the ``ConsoleLogs/{resource}`` route, if any."""
        prefix = self.base_path + "/"
        path = self.navigation_manager.path
        if not path.startswith(prefix) or len(path) == len(prefix):
            return None
        return unquote(path[len(prefix) :])

    @property
    def resources(self) -> list[SelectOption]:
        return list(self._resources or ())

    # -- Lifecycle --

    async def initialize(self) -> None:
        if self._subscription is None:
            self._track_resources()
            if self._task_group is not None:
                self._task_group.start_soon(self.watch_resources)
        await self._on_parameters_set()

    async def after_first_render(self) -> None:
        self._rendered = True
        if self.view_model is not None and self.view_model.selected_resource is not None:
            await self.load_logs()

    async def dispose(self) -> None:
        if self._watch_scope is not None:
            self._watch_scope.cancel()
        if self._subscription is not None:
            await self._subscription.aclose()
        await self.stop_watching_logs()

    async def _on_parameters_set(self) -> None:
        await initialize_view_model(self)

        assert self.view_model is not None
        if self.view_model.selected_resource is None:
            await self.stop_watching_logs()
        elif self._rendered:
            await self.load_logs()

    # -- Resources --

    def _track_resources(self) -> None:
        snapshot, self._subscription = self.resource_service.subscribe_resources()
        for resource in snapshot:
            self._resource_by_name[resource.name.casefold()] = resource
        self._update_resources_list()

    async def watch_resources(self) -> None:
        """Apply resource changes until the subscription ends or the page is disposed."""
        if self._subscription is None:
            self._track_resources()
        assert self._subscription is not None

        with anyio.CancelScope() as scope:
            self._watch_scope = scope
            try:
                async for change in self._subscription:
                    await self.on_resource_changed(change)
            except anyio.ClosedResourceError:
                logger.debug("Resource subscription closed")

    async def on_resource_changed(self, change: ResourceChange) -> None:
        resource = change.resource
        view_model = self.view_model
        assert view_model is not None
        selected = view_model.selected_resource

        if change.change_type is ResourceChangeType.UPSERT:
            self._resource_by_name[resource.name.casefold()] = resource

            if selected is not None and _same_name(selected.name, resource.name):
                # The selected resource was updated
                view_model.selected_resource = resource

                if view_model.initialised_successfully is False:
                    await self.load_logs()
                elif resource.state != "Running":
                    view_model.status = STATUS_FINISHED_WATCHING_LOGS

        elif change.change_type is ResourceChangeType.DELETE:
            removed = self._resource_by_name.pop(resource.name.casefold(), None)
            if removed is None:
                logger.warning("Cannot remove unknown resource %s", resource.name)

            if selected is not None and _same_name(selected.name, resource.name):
                # The selected resource was deleted
                view_model.selected_option = self._no_selection
                await self.handle_selected_option_changed()

        self._update_resources_list()

    def _update_resources_list(self) -> None:
        values = self._resource_by_name.values()
        options = [self._no_selection]
        for resource in sorted(values, key=lambda r: r.name):
            options.append(SelectOption(value=resource.name, text=_display_text(resource, values)))
        self._resources = options

    # -- Selection & logs --

    async def select_resource(self, name: str | None) -> None:
        """Select the resource named *name* (``None`` clears the selection)."""
        assert self.view_model is not None
        self.view_model.selected_option = self._find_option(name)
        await self.handle_selected_option_changed()

    async def handle_selected_option_changed(self) -> None:
        await self.stop_watching_logs()
        await after_view_model_changed(self)
        # Navigating to the new URL sets the route parameters again.
        await self._on_parameters_set()

    async def load_logs(self) -> None:
        view_model = self.view_model
        assert view_model is not None
        resource = view_model.selected_resource

        if resource is None:
            view_model.status = STATUS_NO_RESOURCE_SELECTED
            return

        await self.stop_watching_logs()
        subscription = self.resource_service.subscribe_console_logs(resource.name)
        if subscription is not None:
            self.log_subscription = subscription
            view_model.initialised_successfully = True
            view_model.status = STATUS_WATCHING_LOGS
        else:
            view_model.initialised_successfully = False
            view_model.status = (
                STATUS_FAILED_TO_INITIALIZE if resource.is_container else STATUS_LOGS_NOT_YET_AVAILABLE
            )

    async def stop_watching_logs(self) -> None:
        if self.log_subscription is not None:
            await self.log_subscription.aclose()
            self.log_subscription = None

    # -- Page state --

    def update_view_model_from_query(self, view_model: ConsoleLogsViewModel) -> None:
        name = self.resource_name
        if self._resources is not None and name is not None:
            option = self._find_option(name)
            view_model.selected_option = option
            view_model.selected_resource = (
                None if option.value is None else self._resource_by_name[option.value.casefold()]
            )
            view_model.status = STATUS_LOGS_NOT_YET_AVAILABLE
        else:
            view_model.selected_option = self._no_selection
            view_model.selected_resource = None
            view_model.status = STATUS_NO_RESOURCE_SELECTED

    def get_url_from_serializable_view_model(self, serializable: ConsoleLogsPageState) -> UrlState:
        if serializable.selected_resource is not None:
            return UrlState(f"{self.base_path}/{quote(serializable.selected_resource, safe='')}")
        return UrlState(f"/{self.base_path}")

    def convert_view_model_to_serializable(self) -> ConsoleLogsPageState:
        option = self.view_model.selected_option if self.view_model is not None else None
        return ConsoleLogsPageState(selected_resource=option.value if option is not None else None)

    def _find_option(self, name: str | None) -> SelectOption:
        if name is None:
            return self._no_selection
        for option in self._resources or ():
            if option.value is not None and _same_name(option.value, name):
                return option
        return self._no_selection


def _same_name(left: str, right: str) -> bool:
    # Resource names compare case-insensitively.
    return left.casefold() == right.casefold()


def _display_text(resource: ResourceViewModel, all_resources: Iterable[ResourceViewModel]) -> str:
    resource_name = get_resource_name(resource, all_resources)
    if not resource.state:
        return f"{resource_name} ({UNKNOWN_STATE})"
    if resource.state == "Running":
        return resource_name
    return f"{resource_name} ({resource.state})"
