"""Thread-safe storage of registered resources and their properties."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Generic, TypeVar

from .adapter import Resource
from .poll import PollRegistry
from .resource_id import ResourceId

__all__ = ["Register", "ResourceRegistry"]

S = TypeVar("S", bound=Resource)
P = TypeVar("P")


@dataclass
class Register(Generic[S, P]):
    """A registered resource together with its properties."""

    resource: S
    properties: P


class ResourceRegistry(Generic[S, P]):
    """Maps resource ids to registers and keeps the poll in step with it."""

    def __init__(self, poll_registry: PollRegistry) -> None:
        self._poll_registry = poll_registry
        self._resources: dict[ResourceId, Register[S, P]] = {}
        self._lock = threading.Lock()

    def register(self, resource: S, properties: P, write_readiness: bool) -> ResourceId:
        """Add a resource to the poll and the registry and return its id."""
        # Held across both steps so the poll never reports an unknown id.
        with self._lock:
            resource_id = self._poll_registry.add(resource.source(), write_readiness)
            self._resources[resource_id] = Register(resource, properties)
        return resource_id

    def deregister(self, resource_id: ResourceId) -> bool:
        """Remove a resource; returns ``False`` if it was not registered.

        Holders of the register obtained through :meth:`get` keep using it.
        """
        with self._lock:
            register = self._resources.pop(resource_id, None)
            if register is None:
                return False
            self._poll_registry.remove(register.resource.source())
        return True

    def get(self, resource_id: ResourceId) -> Register[S, P] | None:
        """The register for ``resource_id``, or ``None``."""
        with self._lock:
            return self._resources.get(resource_id)