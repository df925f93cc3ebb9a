"""Resource models and an in-memory resource service.

Pages subscribe to the resources of a running application: they get a
snapshot of the current resources plus a stream of later changes.  The
stream is an ``anyio`` memory object stream, so subscribers iterate it
with ``async for`` and stop when the service closes it.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

logger = logging.getLogger("viewstate.resources")

CONTAINER_RESOURCE_TYPE = "Container"


class ResourceChangeType(Enum):
    UPSERT = "upsert"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ResourceViewModel:
    """A resource of the running application.

    Attributes:
        name: Unique resource name (``frontend-abc12``).
        resource_type: ``Container``, ``Project``, ``Executable``, ...
        display_name: Name shown to users; not necessarily unique.
        state: Lifecycle state such as ``Running``, or ``None`` if unknown.
    """

    name: str
    resource_type: str
    display_name: str
    state: str | None = None

    @property
    def is_container(self) -> bool:
        return self.resource_type == CONTAINER_RESOURCE_TYPE


@dataclass(frozen=True, slots=True)
class ResourceChange:
    change_type: ResourceChangeType
    resource: ResourceViewModel


def get_resource_name(resource: ResourceViewModel, all_resources: Iterable[ResourceViewModel]) -> str:
    """Return the display name, or the unique name if the display name is shared."""
    count = sum(1 for item in all_resources if item.display_name == resource.display_name)
    return resource.name if count > 1 else resource.display_name


class InMemoryResourceService:
    """Resource service backed by a dict, for tests and embedding.

    Usage::

        service = InMemoryResourceService([frontend, backend])
        snapshot, subscription = service.subscribe_resources()
        async for change in subscription:
            ...

        await service.upsert(replace(frontend, state="Exited"))

    Publishing never waits: a subscriber that lets *buffer_size* changes
    pile up is closed and stops receiving.
    """

    __slots__ = ("_buffer_size", "_log_streams", "_resources", "_subscribers")

    def __init__(self, resources: Iterable[ResourceViewModel] = (), *, buffer_size: int = 64) -> None:
        self._resources = {resource.name: resource for resource in resources}
        self._buffer_size = buffer_size
        self._subscribers: list[MemoryObjectSendStream[ResourceChange]] = []
        # resource name -> open console log streams
        self._log_streams: dict[str, list[MemoryObjectSendStream[str]]] = {}

    def subscribe_resources(
        self,
    ) -> tuple[list[ResourceViewModel], MemoryObjectReceiveStream[ResourceChange]]:
        """Return the current resources and a stream of subsequent changes."""
        send, receive = anyio.create_memory_object_stream[ResourceChange](self._buffer_size)
        self._subscribers.append(send)
        return list(self._resources.values()), receive

    async def upsert(self, resource: ResourceViewModel) -> None:
        self._resources[resource.name] = resource
        await self._publish(ResourceChange(ResourceChangeType.UPSERT, resource))

    async def delete(self, name: str) -> None:
        """Remove a resource.

        Raises:
            KeyError: If no resource is named *name*.
        """
        resource = self._resources.pop(name)
        await self._publish(ResourceChange(ResourceChangeType.DELETE, resource))

    def enable_console_logs(self, name: str) -> None:
        """Make console logs of *name* available to subscribers."""
        self._log_streams.setdefault(name, [])

    def subscribe_console_logs(self, name: str) -> MemoryObjectReceiveStream[str] | None:
        """Return a stream of log lines for *name*, or ``None`` if it has no logs yet."""
        streams = self._log_streams.get(name)
        if streams is None:
            return None
        send, receive = anyio.create_memory_object_stream[str](self._buffer_size)
        streams.append(send)
        return receive

    async def write_console_log(self, name: str, line: str) -> None:
        streams = self._log_streams.get(name)
        if streams is not None:
            await _offer(streams, line)

    async def aclose(self) -> None:
        """Close every subscription; subscribers' ``async for`` loops end."""
        for send in self._subscribers:
            await send.aclose()
        self._subscribers.clear()
        for streams in self._log_streams.values():
            for send in streams:
                await send.aclose()
            streams.clear()

    async def _publish(self, change: ResourceChange) -> None:
        await _offer(self._subscribers, change)


async def _offer[T](streams: list[MemoryObjectSendStream[T]], item: T) -> None:
    """Deliver *item* to every stream without waiting on slow readers.

    A stream whose buffer is full is closed and dropped; its reader sees the
    end of the stream once it drains what was buffered.
    """
    for send in tuple(streams):
        try:
            send.send_nowait(item)
        except anyio.WouldBlock:
            logger.warning("Closing a subscription whose buffer is full")
            await send.aclose()
            streams.remove(send)
        except (anyio.BrokenResourceError, anyio.ClosedResourceError):
            logger.debug("Dropping closed subscription")
            streams.remove(send)
