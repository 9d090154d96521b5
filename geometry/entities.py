# entities.py

import enum
from dataclasses import dataclass, field
from typing import Optional

import numpy as np


class MeshElementFlags(enum.IntFlag):
    NONE = 0
    SELECTED = 1 << 0


_SELECTED_BIT = int(MeshElementFlags.SELECTED)


def is_selected(flags: int) -> bool:
    return (int(flags) & _SELECTED_BIT) != 0


def set_selected_flag(flags: int, selected: bool) -> int:
    """Return ``flags`` with the selected bit set or cleared (byte-sized)."""
    if selected:
        return (int(flags) | _SELECTED_BIT) & 0xFF
    return int(flags) & ~_SELECTED_BIT & 0xFF


def _zero_uv() -> np.ndarray:
    return np.zeros(2, dtype=float)


@dataclass
class BmVert:
    position: np.ndarray
    # One loop that uses this vertex (traversal entry point).
    any_loop: Optional[int] = None
    flags: int = 0

    def copy(self):
        return BmVert(self.position.copy(), self.any_loop, self.flags)


@dataclass
class BmEdge:
    v0: int
    v1: int
    # Entry point into the radial cycle around this edge.
    any_loop: Optional[int] = None
    flags: int = 0

    def copy(self):
        return BmEdge(self.v0, self.v1, self.any_loop, self.flags)


@dataclass
class BmFace:
    any_loop: Optional[int] = None
    loop_count: int = 0
    # Only used for render-side submesh grouping.
    material_index: int = 0
    flags: int = 0

    def copy(self):
        return BmFace(self.any_loop, self.loop_count, self.material_index, self.flags)


@dataclass
class BmLoop:
    """A face corner.

    ``next``/``prev`` walk the face ring, ``radial_next``/``radial_prev`` walk
    every loop (from any face) that shares ``edge``. ``edge`` leaves this
    corner toward the next corner of the face.
    """

    face: int
    vert: int
    edge: int
    next: Optional[int] = None
    prev: Optional[int] = None
    radial_next: Optional[int] = None
    radial_prev: Optional[int] = None
    flags: int = 0
    uv: np.ndarray = field(default_factory=_zero_uv)

    def copy(self):
        return BmLoop(
            face=self.face,
            vert=self.vert,
            edge=self.edge,
            next=self.next,
            prev=self.prev,
            radial_next=self.radial_next,
            radial_prev=self.radial_prev,
            flags=self.flags,
            uv=self.uv.copy(),
        )
