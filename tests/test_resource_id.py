import threading

import pytest

from msgnet.resource_id import ResourceId, ResourceIdGenerator, ResourceType


def test_base_value():
    resource_id = ResourceId.create(1, ResourceType.LOCAL, 0)
    assert resource_id.base_value() == 0

    high = ResourceId.MAX_BASE_VALUE
    resource_id = ResourceId.create(1, ResourceType.LOCAL, high)
    assert resource_id.base_value() == high


def test_resource_type():
    resource_id = ResourceId.create(0, ResourceType.LOCAL, 0)
    assert resource_id.resource_type() is ResourceType.LOCAL
    assert resource_id.adapter_id() == 0

    resource_id = ResourceId.create(0, ResourceType.REMOTE, 0)
    assert resource_id.resource_type() is ResourceType.REMOTE
    assert resource_id.adapter_id() == 0


def test_adapter_id():
    adapter_id = ResourceId.MAX_ADAPTER_ID

    resource_id = ResourceId.create(adapter_id, ResourceType.LOCAL, 0)
    assert resource_id.adapter_id() == adapter_id
    assert resource_id.resource_type() is ResourceType.LOCAL

    resource_id = ResourceId.create(adapter_id, ResourceType.REMOTE, 0)
    assert resource_id.adapter_id() == adapter_id
    assert resource_id.resource_type() is ResourceType.REMOTE


def test_limits():
    assert ResourceId.MAX_ADAPTERS == 128
    resource_id = ResourceId.create(127, ResourceType.LOCAL, 0xFF_FFFF_FFFF_FFFF)
    assert resource_id.raw() == 0xFFFF_FFFF_FFFF_FFFF
    assert resource_id.adapter_id() == ResourceId.MAX_ADAPTER_ID == 127
    assert resource_id.base_value() == ResourceId.MAX_BASE_VALUE == 0xFF_FFFF_FFFF_FFFF


def test_raw_layout_and_round_trip():
    resource_id = ResourceId.create(2, ResourceType.LOCAL, 3)
    assert resource_id.raw() == 0x382
    assert ResourceId(resource_id.raw()) == resource_id
    assert resource_id.is_local() and not resource_id.is_remote()


def test_display():
    assert str(ResourceId.create(2, ResourceType.LOCAL, 5)) == "[2.L.5]"
    assert str(ResourceId.create(0, ResourceType.REMOTE, 9)) == "[0.R.9]"
    assert repr(ResourceId.create(0, ResourceType.REMOTE, 9)) == "[0.R.9]"


@pytest.mark.parametrize("adapter_id, base_value", [(128, 0), (-1, 0), (0, 1 << 56)])
def test_out_of_range(adapter_id, base_value):
    with pytest.raises(ValueError):
        ResourceId.create(adapter_id, ResourceType.REMOTE, base_value)


def test_generator_sequence():
    generator = ResourceIdGenerator(3, ResourceType.REMOTE)
    ids = [generator.generate() for _ in range(3)]
    assert [i.base_value() for i in ids] == [0, 1, 2]
    assert all(i.adapter_id() == 3 and i.is_remote() for i in ids)


def test_generator_unique_across_threads():
    generator = ResourceIdGenerator(1, ResourceType.LOCAL)
    results = []
    lock = threading.Lock()

    def work():
        local = [generator.generate() for _ in range(200)]
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(r.base_value() for r in results) == list(range(800))
    following = generator.generate()
    assert following.base_value() == 800
    assert following.is_local()