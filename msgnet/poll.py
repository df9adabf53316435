"""Readiness polling for network resources, built on :mod:`selectors`."""

from __future__ import annotations

import enum
import logging
import selectors
import socket
import threading
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Callable, Union

from .resource_id import ResourceId, ResourceIdGenerator, ResourceType

__all__ = [
    "Readiness",
    "NetworkPollEvent",
    "WakerPollEvent",
    "PollEvent",
    "token_from_resource_id",
    "resource_id_from_token",
    "Poll",
    "PollRegistry",
    "PollWaker",
]

_log = logging.getLogger(__name__)

_RESERVED_BITS = 1
_WAKER_TOKEN = 0


class Readiness(enum.Enum):
    """The kind of event available for a resource."""

    WRITE = "write"
    READ = "read"


@dataclass(frozen=True)
class NetworkPollEvent:
    """A resource became readable or writable."""

    resource_id: ResourceId
    readiness: Readiness


@dataclass(frozen=True)
class WakerPollEvent:
    """The poll was woken by a :class:`PollWaker`."""


PollEvent = Union[NetworkPollEvent, WakerPollEvent]


def token_from_resource_id(resource_id: ResourceId) -> int:
    """The poll token of a resource; never equal to the waker token."""
    return (resource_id.raw() << _RESERVED_BITS) | 1


def resource_id_from_token(token: int) -> ResourceId:
    """The resource id a poll token was made from."""
    return ResourceId(token >> _RESERVED_BITS)


class PollRegistry:
    """Registers sources in a :class:`Poll` and assigns them resource ids."""

    def __init__(
        self,
        adapter_id: int,
        resource_type: ResourceType,
        selector: selectors.BaseSelector,
        lock: threading.Lock,
    ) -> None:
        self._id_generator = ResourceIdGenerator(adapter_id, resource_type)
        self._selector = selector
        self._lock = lock

    def add(self, source: Any, write_readiness: bool) -> ResourceId:
        """Register ``source`` and return the new id that identifies it.

        With ``write_readiness`` the first time the source becomes writable a
        write event is produced.
        """
        resource_id = self._id_generator.generate()
        events = selectors.EVENT_READ
        if write_readiness:
            events |= selectors.EVENT_WRITE
        with self._lock:
            self._selector.register(source, events, token_from_resource_id(resource_id))
        return resource_id

    def remove(self, source: Any) -> None:
        """Stop polling ``source``."""
        with self._lock:
            self._selector.unregister(source)


class PollWaker:
    """Wakes a :class:`Poll` blocked in :meth:`Poll.process_event`."""

    def __init__(self, sender: socket.socket) -> None:
        self._sender = sender

    def wake(self) -> None:
        # A full buffer means a wake-up is already pending.
        with suppress(BlockingIOError):
            self._sender.send(b"\x00")
        _log.debug("Wake poll...")


class Poll:
    """Waits for readiness of registered sources.

    Write readiness is reported once per registration: after a write event the
    source is only polled for reading.
    """

    def __init__(self) -> None:
        self._selector = selectors.DefaultSelector()
        self._lock = threading.Lock()
        self._waker_recv, self._waker_send = socket.socketpair()
        self._waker_recv.setblocking(False)
        self._waker_send.setblocking(False)
        self._selector.register(self._waker_recv, selectors.EVENT_READ, _WAKER_TOKEN)

    def _drain_waker(self) -> None:
        with suppress(BlockingIOError, InterruptedError):
            while self._waker_recv.recv(4096):
                pass

    def _disarm_write(self, key: selectors.SelectorKey) -> None:
        with self._lock, suppress(KeyError, ValueError, OSError):
            self._selector.modify(key.fileobj, selectors.EVENT_READ, key.data)

    def process_event(
        self, timeout: float | None, event_callback: Callable[[PollEvent], None]
    ) -> None:
        """Wait up to ``timeout`` seconds (forever if ``None``) and report events."""
        for key, mask in self._selector.select(timeout):
            if key.data == _WAKER_TOKEN:
                _log.debug("POLL WAKER EVENT")
                self._drain_waker()
                event_callback(WakerPollEvent())
                continue
            resource_id = resource_id_from_token(key.data)
            if mask & selectors.EVENT_READ:
                _log.debug("POLL EVENT (R): %s", resource_id)
                event_callback(NetworkPollEvent(resource_id, Readiness.READ))
            if mask & selectors.EVENT_WRITE:
                self._disarm_write(key)
                _log.debug("POLL EVENT (W): %s", resource_id)
                event_callback(NetworkPollEvent(resource_id, Readiness.WRITE))

    def create_registry(self, adapter_id: int, resource_type: ResourceType) -> PollRegistry:
        """A registry whose ids carry ``adapter_id`` and ``resource_type``."""
        return PollRegistry(adapter_id, resource_type, self._selector, self._lock)

    def create_waker(self) -> PollWaker:
        """A waker that interrupts :meth:`process_event` from any thread."""
        return PollWaker(self._waker_send)

    def close(self) -> None:
        """Release the selector and the waker sockets."""
        self._selector.close()
        self._waker_recv.close()
        self._waker_send.close()

    def __enter__(self) -> Poll:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()