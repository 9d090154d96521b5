import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.slot_list import SlotList
from geometry.edge_index import EdgeIndex, make_edge_key
from geometry.entities import BmEdge


def test_edge_key_ignores_order_and_packs_min_low():
    assert make_edge_key(3, 7) == make_edge_key(7, 3)
    assert make_edge_key(3, 7) == (7 << 32) | 3
    assert make_edge_key(0, 1) != make_edge_key(1, 2)


def test_edge_key_does_not_collide_on_large_ids():
    assert make_edge_key(1, 2**31) != make_edge_key(2**31, 2)
    assert make_edge_key(5, 5) == (5 << 32) | 5


def test_insert_and_lookup_in_either_order():
    index = EdgeIndex()
    index.insert(4, 2, 9)

    assert index.get(2, 4) == 9
    assert index.get(4, 2) == 9
    assert index.get(2, 5) is None
    assert (2, 4) in index
    assert len(index) == 1
    assert list(index.items()) == [((2, 4), 9)]


def test_rebuild_keeps_only_live_edges():
    edges = SlotList()
    for a, b in [(0, 1), (1, 2), (2, 0)]:
        e_id = edges.allocate()
        edges[e_id] = BmEdge(a, b)
    edges.free(1)

    index = EdgeIndex()
    index.insert(7, 8, 99)
    index.rebuild(edges)

    assert len(index) == 2
    assert index.get(1, 0) == 0
    assert index.get(0, 2) == 2
    assert index.get(1, 2) is None
    assert index.get(7, 8) is None


def test_clear_empties_index():
    index = EdgeIndex()
    index.insert(0, 1, 0)
    index.clear()
    assert len(index) == 0
    assert index.get(0, 1) is None


def test_edge_key_rejects_ids_outside_32_bits():
    with pytest.raises(ValueError):
        make_edge_key(2**32, 0)
    with pytest.raises(ValueError):
        make_edge_key(-1, 3)
    assert make_edge_key(2**32 - 1, 0) == ((2**32 - 1) << 32)

    index = EdgeIndex()
    index.insert(0, 0, 1)
    assert index.get(2**32, 0) is None
    with pytest.raises(ValueError):
        index.insert(2**32, 0, 2)
