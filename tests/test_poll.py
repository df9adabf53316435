import socket

import pytest

from msgnet.poll import (
    NetworkPollEvent,
    Poll,
    Readiness,
    WakerPollEvent,
    resource_id_from_token,
    token_from_resource_id,
)
from msgnet.resource_id import ResourceId, ResourceType


@pytest.fixture
def poll():
    with Poll() as p:
        yield p


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    a.setblocking(False)
    b.setblocking(False)
    yield a, b
    a.close()
    b.close()


def collect(poll, timeout):
    events = []
    poll.process_event(timeout, events.append)
    return events


def test_token_of_first_id_is_one():
    assert token_from_resource_id(ResourceId(0)) == 1


@pytest.mark.parametrize(
    "resource_id",
    [
        ResourceId.create(0, ResourceType.REMOTE, 0),
        ResourceId.create(3, ResourceType.LOCAL, 2),
        ResourceId.create(ResourceId.MAX_ADAPTER_ID, ResourceType.LOCAL, 12345),
    ],
)
def test_token_round_trip(resource_id):
    token = token_from_resource_id(resource_id)
    assert token & 1 == 1
    assert resource_id_from_token(token) == resource_id


def test_registry_generates_typed_consecutive_ids(poll, pair):
    a, b = pair
    registry = poll.create_registry(2, ResourceType.LOCAL)
    first = registry.add(a, False)
    second = registry.add(b, False)
    assert first.adapter_id() == 2
    assert first.resource_type() is ResourceType.LOCAL
    assert second.base_value() == first.base_value() + 1


def test_read_event(poll, pair):
    a, b = pair
    registry = poll.create_registry(1, ResourceType.REMOTE)
    resource_id = registry.add(a, False)
    b.send(b"x")
    events = collect(poll, 1.0)
    assert NetworkPollEvent(resource_id, Readiness.READ) in events


def test_no_events_on_timeout(poll, pair):
    a, _ = pair
    registry = poll.create_registry(1, ResourceType.REMOTE)
    registry.add(a, False)
    assert collect(poll, 0.05) == []


def test_write_readiness_reported_once(poll, pair):
    a, _ = pair
    registry = poll.create_registry(0, ResourceType.REMOTE)
    resource_id = registry.add(a, True)
    assert collect(poll, 1.0) == [NetworkPollEvent(resource_id, Readiness.WRITE)]
    assert collect(poll, 0.05) == []


def test_removed_source_gives_no_events(poll, pair):
    a, b = pair
    registry = poll.create_registry(1, ResourceType.REMOTE)
    registry.add(a, False)
    registry.remove(a)
    b.send(b"x")
    assert collect(poll, 0.05) == []


def test_remove_unknown_source_raises(poll, pair):
    a, _ = pair
    registry = poll.create_registry(1, ResourceType.REMOTE)
    with pytest.raises(KeyError):
        registry.remove(a)


def test_waker_event_is_drained(poll):
    waker = poll.create_waker()
    waker.wake()
    waker.wake()
    assert collect(poll, 1.0) == [WakerPollEvent()]
    assert collect(poll, 0.05) == []