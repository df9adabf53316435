"""Builds the per-adapter drivers that the network engine dispatches to."""

from __future__ import annotations

from typing import Any, Callable, Union

from .adapter import Adapter, SendStatus
from .driver import Driver, NetEvent
from .endpoint import Endpoint
from .poll import Poll, Readiness
from .remote_addr import RemoteAddr, SocketAddr
from .resource_id import ResourceId

__all__ = ["UNIMPLEMENTED_DRIVER_ERR", "UnimplementedDriver", "DriverLoader"]

UNIMPLEMENTED_DRIVER_ERR = "The chosen adapter id doesn't reference an existing adapter"

DriverSlot = Union[Driver, "UnimplementedDriver"]


class UnimplementedDriver:
    """Fills the slots of adapter ids that have no adapter mounted.

    Every operation raises ``RuntimeError``.
    """

    def connect(self, addr: RemoteAddr) -> tuple[Endpoint, SocketAddr]:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)

    def listen(self, addr: SocketAddr) -> tuple[ResourceId, SocketAddr]:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)

    def send(self, endpoint: Endpoint, data: bytes) -> SendStatus:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)

    def remove(self, resource_id: ResourceId) -> bool:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)

    def is_ready(self, resource_id: ResourceId) -> bool | None:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)

    def process(
        self,
        resource_id: ResourceId,
        readiness: Readiness,
        event_callback: Callable[[NetEvent], Any],
    ) -> None:
        raise RuntimeError(UNIMPLEMENTED_DRIVER_ERR)


class DriverLoader:
    """Collects adapters, each under an id, and hands out their drivers."""

    def __init__(self) -> None:
        self._poll = Poll()
        self._controllers: list[DriverSlot] = [
            UnimplementedDriver() for _ in range(ResourceId.MAX_ADAPTERS)
        ]
        self._processors: list[DriverSlot] = [
            UnimplementedDriver() for _ in range(ResourceId.MAX_ADAPTERS)
        ]

    def mount(self, adapter_id: int, adapter: Adapter | type[Adapter]) -> None:
        """Create the driver of ``adapter`` and associate it with ``adapter_id``."""
        if not 0 <= adapter_id < ResourceId.MAX_ADAPTERS:
            raise ValueError(f"The adapter_id must be less than {ResourceId.MAX_ADAPTERS}")
        driver = Driver(adapter, adapter_id, self._poll)
        self._controllers[adapter_id] = driver
        self._processors[adapter_id] = driver

    def take(self) -> tuple[Poll, list[DriverSlot], list[DriverSlot]]:
        """The poll, the action controllers and the event processors, by adapter id."""
        return self._poll, list(self._controllers), list(self._processors)