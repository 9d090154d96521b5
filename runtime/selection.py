"""Selection flags on mesh elements and moving what is selected."""

import enum
import logging
from typing import List, Optional, Set

import numpy as np

from geometry.editable_mesh import EditableMesh
from geometry.entities import is_selected, set_selected_flag

logger = logging.getLogger("editable_mesh")


class SelectionMode(enum.Enum):
    """Which element type is selectable."""

    VERTEX = "vertex"
    EDGE = "edge"
    FACE = "face"

    @classmethod
    def parse(cls, value) -> "SelectionMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown selection mode {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}."
            ) from None


def _table(mesh: EditableMesh, mode: SelectionMode):
    if mode is SelectionMode.VERTEX:
        return mesh.verts
    if mode is SelectionMode.EDGE:
        return mesh.edges
    return mesh.faces


def clear_selection(mesh: EditableMesh) -> None:
    for table in (mesh.verts, mesh.edges, mesh.faces):
        for element in table:
            element.flags = set_selected_flag(element.flags, False)


def apply_selection(
    mesh: EditableMesh,
    mode: SelectionMode,
    element_id: int,
    toggle: bool = False,
) -> None:
    """Select one element.

    Without ``toggle`` the previous selection is replaced; with it the
    element's state is flipped and everything else is kept.
    """
    mode = SelectionMode.parse(mode)
    table = _table(mesh, mode)
    if not table.is_alive(element_id):
        return

    if not toggle:
        clear_selection(mesh)

    element = table[element_id]
    selected = not is_selected(element.flags) if toggle else True
    element.flags = set_selected_flag(element.flags, selected)


def selected_elements(mesh: EditableMesh, mode: SelectionMode) -> List[int]:
    table = _table(mesh, SelectionMode.parse(mode))
    return [i for i in table.alive_ids() if is_selected(table[i].flags)]


def collect_selected_vertices(mesh: EditableMesh, mode: SelectionMode) -> Set[int]:
    """Return the vertex ids affected by the selection in ``mode``."""
    mode = SelectionMode.parse(mode)
    selected: Set[int] = set()
    if mode is SelectionMode.VERTEX:
        selected.update(selected_elements(mesh, mode))
    elif mode is SelectionMode.EDGE:
        for e_id in selected_elements(mesh, mode):
            edge = mesh.edges[e_id]
            selected.add(edge.v0)
            selected.add(edge.v1)
    else:
        for f_id in selected_elements(mesh, mode):
            selected.update(mesh.face_vertices(f_id))
    return selected


def selection_centroid(
    mesh: EditableMesh, mode: SelectionMode
) -> Optional[np.ndarray]:
    v_ids = sorted(collect_selected_vertices(mesh, mode))
    if not v_ids:
        return None
    return mesh.vertex_positions(v_ids).mean(axis=0)


def translate_selection(mesh: EditableMesh, mode: SelectionMode, delta) -> int:
    """Move every vertex touched by the selection by ``delta``.

    Returns the number of vertices moved.
    """
    delta = np.asarray(delta, dtype=float).reshape(3)
    if float(np.dot(delta, delta)) <= np.finfo(float).eps:
        return 0

    v_ids = collect_selected_vertices(mesh, mode)
    for v_id in v_ids:
        vert = mesh.verts[v_id]
        vert.position = vert.position + delta

    if v_ids:
        logger.debug("Translated %d vertices by %s.", len(v_ids), delta.tolist())
    return len(v_ids)
