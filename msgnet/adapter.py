"""The interface a transport adapter implements to plug into the driver."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Generic, TypeVar, Union

from .poll import Readiness
from .remote_addr import RemoteAddr, SocketAddr

__all__ = [
    "SendStatus",
    "ReadStatus",
    "PendingStatus",
    "ConnectionInfo",
    "ListeningInfo",
    "AcceptedRemote",
    "AcceptedData",
    "AcceptedType",
    "Resource",
    "Remote",
    "Local",
    "Adapter",
]


class SendStatus(enum.Enum):
    """Outcome of sending data."""

    SENT = "sent"
    MAX_PACKET_SIZE_EXCEEDED = "max_packet_size_exceeded"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RESOURCE_NOT_AVAILABLE = "resource_not_available"


class ReadStatus(enum.Enum):
    """Outcome of :meth:`Remote.receive`."""

    DISCONNECTED = "disconnected"
    WAIT_NEXT_EVENT = "wait_next_event"


class PendingStatus(enum.Enum):
    """Outcome of :meth:`Remote.pending`."""

    READY = "ready"
    INCOMPLETE = "incomplete"
    DISCONNECTED = "disconnected"


R = TypeVar("R", bound="Remote")
L = TypeVar("L", bound="Local")


@dataclass
class ConnectionInfo(Generic[R]):
    """What :meth:`Remote.connect` returns."""

    remote: R
    local_addr: SocketAddr
    peer_addr: SocketAddr


@dataclass
class ListeningInfo(Generic[L]):
    """What :meth:`Local.listen` returns."""

    local: L
    local_addr: SocketAddr


@dataclass
class AcceptedRemote(Generic[R]):
    """A listener accepted a new remote connection from ``addr``."""

    addr: SocketAddr
    remote: R

    def __str__(self) -> str:
        return f"AcceptedType::Remote({RemoteAddr(self.addr)})"


@dataclass
class AcceptedData:
    """A listener received a message from ``addr`` without creating a remote."""

    addr: SocketAddr
    data: bytes

    def __str__(self) -> str:
        return f"AcceptedType::Data({RemoteAddr(self.addr)})"


AcceptedType = Union[AcceptedRemote, AcceptedData]


class Resource(ABC):
    """Something that can be registered in the poll."""

    @abstractmethod
    def source(self) -> Any:
        """The pollable object (anything with ``fileno()``)."""


class Remote(Resource):
    """A connection to a remote peer."""

    @classmethod
    @abstractmethod
    def connect(cls, remote_addr: RemoteAddr) -> ConnectionInfo:
        """Create a connection to ``remote_addr``; raises ``OSError`` on failure."""

    @abstractmethod
    def receive(self, process_data: Callable[[bytes], None]) -> ReadStatus:
        """Read everything available, calling ``process_data`` per message."""

    @abstractmethod
    def send(self, data: bytes) -> SendStatus:
        """Send all of ``data``."""

    @abstractmethod
    def pending(self, readiness: Readiness) -> PendingStatus:
        """Advance the connection set-up and tell whether it is ready."""

    def ready_to_write(self) -> bool:
        """Flush pending data; ``False`` means the resource must be removed."""
        return True


class Local(Resource):
    """A listener that accepts remotes or receives data."""

    @classmethod
    @abstractmethod
    def listen(cls, addr: SocketAddr) -> ListeningInfo:
        """Start listening on ``addr``; raises ``OSError`` on failure."""

    @abstractmethod
    def accept(self, accept_remote: Callable[[AcceptedType], None]) -> None:
        """Accept every pending connection or datagram."""

    def send_to(self, addr: SocketAddr, data: bytes) -> SendStatus:
        """Send ``data`` to ``addr`` straight from the listener."""
        raise RuntimeError(
            "Adapter not configured to send messages directly from the local resource"
        )


class Adapter:
    """A transport: subclasses set the ``remote`` and ``local`` classes they use."""

    remote: ClassVar[type[Remote]]
    local: ClassVar[type[Local]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        remote = getattr(cls, "remote", None)
        local = getattr(cls, "local", None)
        if not (isinstance(remote, type) and issubclass(remote, Remote)):
            raise TypeError(f"{cls.__name__}.remote must be a Remote subclass")
        if not (isinstance(local, type) and issubclass(local, Local)):
            raise TypeError(f"{cls.__name__}.local must be a Local subclass")