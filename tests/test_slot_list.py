import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.exceptions import InvalidElementIdError
from core.slot_list import SlotList


def test_allocate_grows_with_ascending_ids():
    slots = SlotList()
    assert [slots.allocate() for _ in range(3)] == [0, 1, 2]
    assert slots.capacity == 3
    assert len(slots) == 3
    assert all(slots.is_alive(i) for i in range(3))


def test_free_is_idempotent_and_reuse_is_lifo():
    slots = SlotList()
    for _ in range(4):
        slots.allocate()

    slots.free(1)
    slots.free(3)
    slots.free(3)
    assert not slots.is_alive(1)
    assert not slots.is_alive(3)
    assert len(slots) == 2
    assert slots.capacity == 4

    assert slots.allocate() == 3
    assert slots.allocate() == 1
    assert slots.allocate() == 4


def test_is_alive_rejects_out_of_range_and_sentinels():
    slots = SlotList()
    slots.allocate()
    assert not slots.is_alive(-1)
    assert not slots.is_alive(None)
    assert not slots.is_alive(1)


def test_reused_slot_holds_only_new_data():
    slots = SlotList()
    i = slots.allocate()
    slots[i] = {"neighbour": 7}
    slots.free(i)

    j = slots.allocate()
    assert j == i
    assert slots.is_alive(j)
    assert slots[j] is None

    slots[j] = {"fresh": True}
    assert slots[j] == {"fresh": True}


def test_access_to_dead_or_missing_slot_raises():
    slots = SlotList()
    i = slots.allocate()
    slots[i] = "x"
    slots.free(i)

    with pytest.raises(InvalidElementIdError):
        slots[i]
    with pytest.raises(InvalidElementIdError):
        slots[5]
    with pytest.raises(InvalidElementIdError):
        slots[-1]
    with pytest.raises(IndexError):
        slots[i] = "y"


def test_alive_ids_scans_in_ascending_order():
    slots = SlotList()
    for k in range(5):
        slots[slots.allocate()] = k
    slots.free(0)
    slots.free(3)

    assert list(slots.alive_ids()) == [1, 2, 4]
    assert list(slots) == [1, 2, 4]


def test_clear_drops_everything():
    slots = SlotList()
    slots.allocate()
    slots.free(slots.allocate())
    slots.clear()

    assert slots.capacity == 0
    assert len(slots) == 0
    assert slots.allocate() == 0


def test_copy_duplicates_records_and_free_stack():
    slots = SlotList()
    for k in range(3):
        slots[slots.allocate()] = {"value": k}
    slots.free(1)

    clone = slots.copy()
    clone[0]["value"] = 99

    assert slots[0] == {"value": 0}
    assert list(clone.alive_ids()) == [0, 2]
    assert clone.allocate() == 1
    assert not slots.is_alive(1)
