"""Identifiers for network resources, packing adapter, type and a counter."""

from __future__ import annotations

import enum
import itertools
import threading
from dataclasses import dataclass

__all__ = ["ResourceType", "ResourceId", "ResourceIdGenerator"]

_ADAPTER_ID_POS = 0
_RESOURCE_TYPE_POS = 7
_BASE_VALUE_POS = 8

_ADAPTER_ID_MASK = 0b0111_1111
_BASE_VALUE_MASK = 0xFFFF_FFFF_FFFF_FF00


class ResourceType(enum.Enum):
    """Whether a resource listens (local) or is a connection (remote)."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class ResourceId:
    """Unique identifier of a network resource.

    It packs the adapter id, the resource type and a base value unique inside
    its adapter. Build one from its raw value with ``ResourceId(raw)``.
    """

    value: int

    MAX_BASE_VALUE = _BASE_VALUE_MASK >> _BASE_VALUE_POS
    MAX_ADAPTER_ID = _ADAPTER_ID_MASK >> _ADAPTER_ID_POS
    MAX_ADAPTERS = MAX_ADAPTER_ID + 1

    @classmethod
    def create(cls, adapter_id: int, resource_type: ResourceType, base_value: int) -> ResourceId:
        """Build an id from its parts; raises ``ValueError`` if one is out of range."""
        if not 0 <= adapter_id <= cls.MAX_ADAPTER_ID:
            raise ValueError(f"The adapter_id must be less than {cls.MAX_ADAPTER_ID + 1}")
        if not 0 <= base_value <= cls.MAX_BASE_VALUE:
            raise ValueError(f"The base_value must be less than {cls.MAX_BASE_VALUE + 1}")
        type_bit = 1 << _RESOURCE_TYPE_POS if resource_type is ResourceType.LOCAL else 0
        return cls(
            adapter_id << _ADAPTER_ID_POS | type_bit | base_value << _BASE_VALUE_POS
        )

    def raw(self) -> int:
        """The packed integer representation."""
        return self.value

    def resource_type(self) -> ResourceType:
        if self.value & (1 << _RESOURCE_TYPE_POS):
            return ResourceType.LOCAL
        return ResourceType.REMOTE

    def is_local(self) -> bool:
        return self.resource_type() is ResourceType.LOCAL

    def is_remote(self) -> bool:
        return self.resource_type() is ResourceType.REMOTE

    def adapter_id(self) -> int:
        return (self.value & _ADAPTER_ID_MASK) >> _ADAPTER_ID_POS

    def base_value(self) -> int:
        return (self.value & _BASE_VALUE_MASK) >> _BASE_VALUE_POS

    def __str__(self) -> str:
        kind = "L" if self.is_local() else "R"
        return f"[{self.adapter_id()}.{kind}.{self.base_value()}]"

    def __repr__(self) -> str:
        return str(self)


class ResourceIdGenerator:
    """Hands out consecutive ids for one adapter and resource type; thread safe."""

    def __init__(self, adapter_id: int, resource_type: ResourceType) -> None:
        self.adapter_id = adapter_id
        self.resource_type = resource_type
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def generate(self) -> ResourceId:
        with self._lock:
            last = next(self._counter)
        return ResourceId.create(self.adapter_id, self.resource_type, last)