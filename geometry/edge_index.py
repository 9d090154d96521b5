"""Lookup from an unordered vertex pair to the edge joining it."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from core.slot_list import SlotList
from geometry.entities import BmEdge

logger = logging.getLogger("editable_mesh")

_LOW_MASK = 0xFFFFFFFF


def make_edge_key(a: int, b: int) -> int:
    """Pack ``min(a, b)`` into the low 32 bits and ``max(a, b)`` into the high.

    Raises ValueError for ids outside ``0..2**32 - 1``.
    """
    lo, hi = (a, b) if a <= b else (b, a)
    if lo < 0 or hi > _LOW_MASK:
        raise ValueError(f"Vertex ids must fit in 32 bits, got ({a}, {b}).")
    return (hi << 32) | lo


class EdgeIndex:
    def __init__(self) -> None:
        self._map: Dict[int, int] = {}

    def get(self, a: int, b: int) -> Optional[int]:
        if not (0 <= a <= _LOW_MASK and 0 <= b <= _LOW_MASK):
            return None
        return self._map.get(make_edge_key(a, b))

    def insert(self, a: int, b: int, edge_id: int) -> None:
        self._map[make_edge_key(a, b)] = edge_id

    def clear(self) -> None:
        self._map.clear()

    def rebuild(self, edges: SlotList[BmEdge]) -> None:
        """Replace the contents with one entry per live edge."""
        self._map = {}
        for e_id in edges.alive_ids():
            edge = edges[e_id]
            self._map[make_edge_key(edge.v0, edge.v1)] = e_id
        logger.debug("Rebuilt edge index with %d entries.", len(self._map))

    def __contains__(self, pair) -> bool:
        a, b = pair
        return make_edge_key(a, b) in self._map

    def __len__(self) -> int:
        return len(self._map)

    def items(self):
        """Yield ``((lo, hi), edge_id)`` for every entry."""
        for key, edge_id in self._map.items():
            yield (key & _LOW_MASK, key >> 32), edge_id
