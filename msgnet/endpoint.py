"""Endpoints identify the other side of a connection."""

from __future__ import annotations

from dataclasses import dataclass

from .remote_addr import RemoteAddr, SocketAddr
from .resource_id import ResourceId, ResourceType
from .transport import Transport

__all__ = ["Endpoint"]


@dataclass(frozen=True)
class Endpoint:
    """A network resource together with the peer address it talks to.

    Several endpoints may share one resource, as happens with the different
    peers seen by a UDP listener.
    """

    resource_id: ResourceId
    addr: SocketAddr

    @classmethod
    def from_listener(cls, resource_id: ResourceId, addr: SocketAddr) -> Endpoint:
        """An endpoint that sends from a listener of a connectionless transport.

        Raises ``ValueError`` if ``resource_id`` is not a local resource or its
        transport is connection oriented.
        """
        if resource_id.resource_type() is not ResourceType.LOCAL:
            raise ValueError("Only local resources allowed")
        if Transport.from_id(resource_id.adapter_id()).is_connection_oriented():
            raise ValueError("Only non connection-oriented transport protocols allowed")
        return cls(resource_id, addr)

    def __str__(self) -> str:
        return f"{self.resource_id} {RemoteAddr(self.addr)}"