"""Per-adapter driver: turns poll readiness into network events and actions."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, TypeVar, Union

from .adapter import (
    AcceptedRemote,
    Adapter,
    Local,
    PendingStatus,
    ReadStatus,
    Remote,
    SendStatus,
)
from .endpoint import Endpoint
from .poll import Poll, Readiness
from .registry import Register, ResourceRegistry
from .remote_addr import RemoteAddr, SocketAddr
from .resource_id import ResourceId, ResourceType

__all__ = [
    "Connected",
    "Accepted",
    "Message",
    "Disconnected",
    "NetEvent",
    "RemoteProperties",
    "Driver",
]

_log = logging.getLogger(__name__)

R = TypeVar("R", bound=Remote)
L = TypeVar("L", bound=Local)


@dataclass(frozen=True)
class Connected:
    """Result of a connection request; ``status`` tells whether it succeeded."""

    endpoint: Endpoint
    status: bool

    def __str__(self) -> str:
        return f"NetEvent::Connected({self.endpoint}, {str(self.status).lower()})"


@dataclass(frozen=True)
class Accepted:
    """A listener accepted a new connection that is now ready to use."""

    endpoint: Endpoint
    listener_id: ResourceId

    def __str__(self) -> str:
        return f"NetEvent::Accepted({self.endpoint}, {self.listener_id})"


@dataclass(frozen=True)
class Message:
    """Data received from an endpoint."""

    endpoint: Endpoint
    data: bytes

    def __str__(self) -> str:
        return f"NetEvent::Message({self.endpoint}, {len(self.data)})"


@dataclass(frozen=True)
class Disconnected:
    """A connection was lost; its resource is already removed."""

    endpoint: Endpoint

    def __str__(self) -> str:
        return f"NetEvent::Disconnected({self.endpoint})"


NetEvent = Union[Connected, Accepted, Message, Disconnected]
EventCallback = Callable[[NetEvent], None]


@dataclass
class RemoteProperties:
    """State kept by the driver for each remote resource."""

    peer_addr: SocketAddr
    local: Optional[ResourceId] = None
    _ready: threading.Event = field(
        default_factory=threading.Event, repr=False, compare=False
    )

    def is_ready(self) -> bool:
        return self._ready.is_set()

    def mark_as_ready(self) -> None:
        self._ready.set()


class _LocalProperties:
    """Listeners carry no extra state."""


class Driver(Generic[R, L]):
    """Performs the actions and processes the events of one adapter."""

    def __init__(self, adapter: Adapter | type[Adapter], adapter_id: int, poll: Poll) -> None:
        self._remote_cls: type[Remote] = adapter.remote
        self._local_cls: type[Local] = adapter.local
        self._remote_registry: ResourceRegistry[R, RemoteProperties] = ResourceRegistry(
            poll.create_registry(adapter_id, ResourceType.REMOTE)
        )
        self._local_registry: ResourceRegistry[L, _LocalProperties] = ResourceRegistry(
            poll.create_registry(adapter_id, ResourceType.LOCAL)
        )

    # Actions

    def connect(self, addr: RemoteAddr) -> tuple[Endpoint, SocketAddr]:
        """Connect to ``addr``; returns the endpoint and the local address.

        Errors from the adapter (``OSError``) propagate.
        """
        info = self._remote_cls.connect(addr)
        resource_id = self._remote_registry.register(
            info.remote, RemoteProperties(info.peer_addr, None), True
        )
        return Endpoint(resource_id, info.peer_addr), info.local_addr

    def listen(self, addr: SocketAddr) -> tuple[ResourceId, SocketAddr]:
        """Listen on ``addr``; returns the listener id and the real address."""
        info = self._local_cls.listen(addr)
        resource_id = self._local_registry.register(info.local, _LocalProperties(), False)
        return resource_id, info.local_addr

    def send(self, endpoint: Endpoint, data: bytes) -> SendStatus:
        """Send ``data`` through the resource of ``endpoint``."""
        resource_id = endpoint.resource_id
        if resource_id.resource_type() is ResourceType.REMOTE:
            remote = self._remote_registry.get(resource_id)
            if remote is None:
                return SendStatus.RESOURCE_NOT_FOUND
            if not remote.properties.is_ready():
                return SendStatus.RESOURCE_NOT_AVAILABLE
            return remote.resource.send(data)
        local = self._local_registry.get(resource_id)
        if local is None:
            return SendStatus.RESOURCE_NOT_FOUND
        return local.resource.send_to(endpoint.addr, data)

    def remove(self, resource_id: ResourceId) -> bool:
        """Remove a resource; ``False`` if it did not exist."""
        if resource_id.resource_type() is ResourceType.REMOTE:
            return self._remote_registry.deregister(resource_id)
        return self._local_registry.deregister(resource_id)

    def is_ready(self, resource_id: ResourceId) -> bool | None:
        """Whether the resource is ready; ``None`` if it does not exist."""
        if resource_id.resource_type() is ResourceType.REMOTE:
            remote = self._remote_registry.get(resource_id)
            return None if remote is None else remote.properties.is_ready()
        return None if self._local_registry.get(resource_id) is None else True

    # Event processing

    def process(
        self, resource_id: ResourceId, readiness: Readiness, event_callback: EventCallback
    ) -> None:
        """Handle a poll event for ``resource_id``, reporting network events."""
        if resource_id.resource_type() is ResourceType.REMOTE:
            remote = self._remote_registry.get(resource_id)
            if remote is None:
                return
            endpoint = Endpoint(resource_id, remote.properties.peer_addr)
            _log.debug("Processed remote for %s", endpoint)

            if not remote.properties.is_ready():
                self._resolve_pending_remote(remote, endpoint, readiness, event_callback)
            if remote.properties.is_ready():
                if readiness is Readiness.WRITE:
                    self._write_to_remote(remote, endpoint, event_callback)
                else:
                    self._read_from_remote(remote, endpoint, event_callback)
        else:
            local = self._local_registry.get(resource_id)
            if local is None:
                return
            _log.debug("Processed local for %s", resource_id)
            if readiness is Readiness.READ:
                self._read_from_local(local, resource_id, event_callback)

    def _resolve_pending_remote(
        self,
        remote: Register[R, RemoteProperties],
        endpoint: Endpoint,
        readiness: Readiness,
        event_callback: EventCallback,
    ) -> None:
        status = remote.resource.pending(readiness)
        _log.debug("Resolve pending for %s: %s", endpoint, status)
        if status is PendingStatus.READY:
            remote.properties.mark_as_ready()
            listener_id = remote.properties.local
            if listener_id is not None:
                event_callback(Accepted(endpoint, listener_id))
            else:
                event_callback(Connected(endpoint, True))
            remote.resource.ready_to_write()
        elif status is PendingStatus.DISCONNECTED:
            self._remote_registry.deregister(endpoint.resource_id)
            if remote.properties.local is None:
                event_callback(Connected(endpoint, False))

    def _write_to_remote(
        self,
        remote: Register[R, RemoteProperties],
        endpoint: Endpoint,
        event_callback: EventCallback,
    ) -> None:
        if not remote.resource.ready_to_write():
            event_callback(Disconnected(endpoint))

    def _read_from_remote(
        self,
        remote: Register[R, RemoteProperties],
        endpoint: Endpoint,
        event_callback: EventCallback,
    ) -> None:
        status = remote.resource.receive(
            lambda data: event_callback(Message(endpoint, bytes(data)))
        )
        _log.debug("Receive status: %s", status)
        # The callback may already have removed this resource.
        if status is ReadStatus.DISCONNECTED and self._remote_registry.deregister(
            endpoint.resource_id
        ):
            event_callback(Disconnected(endpoint))

    def _read_from_local(
        self,
        local: Register[L, _LocalProperties],
        resource_id: ResourceId,
        event_callback: EventCallback,
    ) -> None:
        def on_accepted(accepted: object) -> None:
            _log.debug("Accepted type: %s", accepted)
            if isinstance(accepted, AcceptedRemote):
                self._remote_registry.register(
                    accepted.remote, RemoteProperties(accepted.addr, resource_id), True
                )
            else:
                endpoint = Endpoint(resource_id, accepted.addr)
                event_callback(Message(endpoint, bytes(accepted.data)))

        local.resource.accept(on_accepted)