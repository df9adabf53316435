"""The transport protocols a node can use."""

from __future__ import annotations

import enum

__all__ = ["Transport"]


class Transport(enum.Enum):
    """Underlying transport protocol; the value is the adapter id."""

    TCP = 0
    FRAMED_TCP = 1
    UDP = 2
    WS = 3

    def is_connection_oriented(self) -> bool:
        """True if connection and disconnection events are produced."""
        return self is not Transport.UDP

    def is_packet_based(self) -> bool:
        """True if every send corresponds to exactly one received message."""
        return self is not Transport.TCP

    def id(self) -> int:
        """The adapter id used for this transport."""
        return self.value

    @classmethod
    def from_id(cls, adapter_id: int) -> Transport:
        """The transport with the given adapter id; ``ValueError`` if none."""
        try:
            return cls(adapter_id)
        except ValueError:
            raise ValueError("Not available transport") from None

    def __str__(self) -> str:
        return _NAMES[self]


_NAMES = {
    Transport.TCP: "Tcp",
    Transport.FRAMED_TCP: "FramedTcp",
    Transport.UDP: "Udp",
    Transport.WS: "Ws",
}