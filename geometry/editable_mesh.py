"""Editable polygon mesh built on half-edge style loops.

Elements live in four :class:`~core.slot_list.SlotList` arenas and name each
other only by integer id. Every face owns a ring of loops (one per corner)
linked through ``next``/``prev``; every edge owns a radial cycle of the loops
that run along it, linked through ``radial_next``/``radial_prev``.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from core.exceptions import InvalidElementIdError, InvalidFaceError
from core.slot_list import SlotList
from geometry.edge_index import EdgeIndex
from geometry.entities import BmEdge, BmFace, BmLoop, BmVert
from geometry.render_mesh import (
    RenderMesh,
    bake_to_render_mesh,
    load_from_render_mesh,
    remap_submesh_materials,
)

logger = logging.getLogger("editable_mesh")


class EditableMesh:
    def __init__(self) -> None:
        self.verts: SlotList[BmVert] = SlotList()
        self.edges: SlotList[BmEdge] = SlotList()
        self.faces: SlotList[BmFace] = SlotList()
        self.loops: SlotList[BmLoop] = SlotList()
        self._edge_index = EdgeIndex()

    @classmethod
    def from_render_mesh(cls, render_mesh: RenderMesh) -> "EditableMesh":
        mesh = cls()
        mesh.load_from_render_mesh(
            render_mesh.positions, render_mesh.uv0, render_mesh.submeshes
        )
        remap_submesh_materials(mesh, render_mesh.material_indices)
        return mesh

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def copy(self) -> "EditableMesh":
        """Deep copy that keeps every id, free slot and link unchanged."""
        new_mesh = EditableMesh()
        new_mesh.verts = self.verts.copy()
        new_mesh.edges = self.edges.copy()
        new_mesh.faces = self.faces.copy()
        new_mesh.loops = self.loops.copy()
        new_mesh.rebuild_edge_index()
        return new_mesh

    def clear(self) -> None:
        """Discard every element and the edge index together."""
        self.verts.clear()
        self.edges.clear()
        self.faces.clear()
        self.loops.clear()
        self._edge_index.clear()

    def rebuild_edge_index(self) -> None:
        self._edge_index.rebuild(self.edges)

    @property
    def edge_index(self) -> EdgeIndex:
        return self._edge_index

    def add_vertex(self, position) -> int:
        v_id = self.verts.allocate()
        pos = np.asarray(position, dtype=float).reshape(3).copy()
        self.verts[v_id] = BmVert(position=pos, any_loop=None, flags=0)
        return v_id

    def get_or_create_edge(self, a: int, b: int) -> int:
        """Return the edge joining ``a`` and ``b``, creating it if needed.

        The lookup ignores order; a new edge stores its endpoints in the order
        given.
        """
        for v_id in (a, b):
            if not self.verts.is_alive(v_id):
                raise InvalidElementIdError(v_id)

        existing = self._edge_index.get(a, b)
        if existing is not None:
            return existing

        e_id = self.edges.allocate()
        self.edges[e_id] = BmEdge(v0=int(a), v1=int(b), any_loop=None, flags=0)
        self._edge_index.insert(a, b, e_id)
        return e_id

    def add_face(
        self,
        face_verts: Sequence[int],
        material_index: int = 0,
        uvs: Optional[Sequence] = None,
    ) -> int:
        """Create a face from an ordered list of vertex ids (at least 3).

        Builds one loop per corner, links them into the face ring in input
        order and inserts each into the radial cycle of its edge. ``uvs``, if
        given, is applied with :meth:`set_face_uvs`.
        """
        if face_verts is None or len(face_verts) < 3:
            raise InvalidFaceError(0 if face_verts is None else len(face_verts))

        face_verts = [int(v) for v in face_verts]
        for v_id in face_verts:
            if not self.verts.is_alive(v_id):
                raise InvalidElementIdError(v_id)

        n = len(face_verts)
        f_id = self.faces.allocate()
        self.faces[f_id] = BmFace(
            any_loop=None, loop_count=n, material_index=int(material_index), flags=0
        )

        loop_ids: List[int] = []
        for i in range(n):
            v_this = face_verts[i]
            v_next = face_verts[(i + 1) % n]
            e_id = self.get_or_create_edge(v_this, v_next)

            l_id = self.loops.allocate()
            self.loops[l_id] = BmLoop(face=f_id, vert=v_this, edge=e_id)
            loop_ids.append(l_id)

            vert = self.verts[v_this]
            if vert.any_loop is None:
                vert.any_loop = l_id

        for i, l_id in enumerate(loop_ids):
            loop = self.loops[l_id]
            loop.next = loop_ids[(i + 1) % n]
            loop.prev = loop_ids[(i - 1) % n]

        self.faces[f_id].any_loop = loop_ids[0]

        for l_id in loop_ids:
            self._insert_loop_into_radial(l_id)

        if uvs is not None:
            self.set_face_uvs(f_id, uvs)
        return f_id

    def set_face_uvs(self, face_id: Optional[int], uvs: Optional[Sequence]) -> None:
        """Assign per-corner UVs walking the ring from the face's entry loop.

        Invalid faces, empty lists and broken rings are silently tolerated;
        extra UVs are ignored and missing ones leave the corner untouched.
        """
        if uvs is None or not self.faces.is_alive(face_id):
            return

        face = self.faces[face_id]
        if face.any_loop is None or face.loop_count <= 0:
            return

        l_id = face.any_loop
        for i in range(min(face.loop_count, len(uvs))):
            if not self.loops.is_alive(l_id):
                break
            loop = self.loops[l_id]
            loop.uv = np.asarray(uvs[i], dtype=float).reshape(2).copy()
            l_id = loop.next
            if l_id is None:
                break

    def _insert_loop_into_radial(self, loop_id: int) -> None:
        loop = self.loops[loop_id]
        edge = self.edges[loop.edge]

        if edge.any_loop is None:
            edge.any_loop = loop_id
            loop.radial_next = loop_id
            loop.radial_prev = loop_id
            return

        # (a <-> b) becomes (a <-> new <-> b)
        a = edge.any_loop
        loop_a = self.loops[a]
        b = loop_a.radial_next
        loop_b = self.loops[b]

        loop.radial_prev = a
        loop.radial_next = b
        loop_a.radial_next = loop_id
        loop_b.radial_prev = loop_id

    # ------------------------------------------------------------------
    # Render conversion
    # ------------------------------------------------------------------
    def load_from_render_mesh(self, positions, uv0=None, submesh_triangles=()) -> None:
        load_from_render_mesh(self, positions, uv0, submesh_triangles)

    def bake_to_render_mesh(self) -> RenderMesh:
        return bake_to_render_mesh(self)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def face_loops(self, face_id: Optional[int]) -> List[int]:
        """Loop ids of a face in ring order.

        Stops after ``loop_count`` loops or at the first missing link, so a
        short result means the ring is malformed.
        """
        if not self.faces.is_alive(face_id):
            return []

        face = self.faces[face_id]
        result: List[int] = []
        l_id = face.any_loop
        while len(result) < face.loop_count and self.loops.is_alive(l_id):
            result.append(l_id)
            l_id = self.loops[l_id].next
        return result

    def face_vertices(self, face_id: Optional[int]) -> List[int]:
        return [self.loops[l_id].vert for l_id in self.face_loops(face_id)]

    def face_center(self, face_id: int) -> Optional[np.ndarray]:
        v_ids = self.face_vertices(face_id)
        if not v_ids:
            return None
        return np.mean([self.verts[v].position for v in v_ids], axis=0)

    def edge_center(self, edge_id: int) -> Optional[np.ndarray]:
        if not self.edges.is_alive(edge_id):
            return None
        edge = self.edges[edge_id]
        return 0.5 * (self.verts[edge.v0].position + self.verts[edge.v1].position)

    def radial_loops(self, edge_id: Optional[int]) -> List[int]:
        """Loop ids around an edge, starting at its entry loop."""
        if not self.edges.is_alive(edge_id):
            return []

        start = self.edges[edge_id].any_loop
        result: List[int] = []
        l_id = start
        # A well-formed cycle never exceeds the loop table.
        while self.loops.is_alive(l_id) and len(result) <= self.loops.capacity:
            result.append(l_id)
            l_id = self.loops[l_id].radial_next
            if l_id == start:
                break
        return result

    def edge_faces(self, edge_id: Optional[int]) -> List[int]:
        return [self.loops[l_id].face for l_id in self.radial_loops(edge_id)]

    def vertex_positions(self, vertex_ids: Optional[Iterable[int]] = None) -> np.ndarray:
        """Return a dense ``(N, 3)`` array of positions in ascending id order."""
        if vertex_ids is None:
            vertex_ids = self.verts.alive_ids()
        rows = [self.verts[v].position for v in vertex_ids]
        if not rows:
            return np.empty((0, 3), dtype=float)
        return np.array(rows, dtype=float)

    @property
    def num_vertices(self) -> int:
        return len(self.verts)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    @property
    def num_loops(self) -> int:
        return len(self.loops)

    def __str__(self):
        return (
            f"EditableMesh with {self.num_vertices} vertices, {self.num_edges} edges, "
            f"{self.num_faces} faces, and {self.num_loops} loops."
        )

    def __repr__(self):
        return (
            f"EditableMesh(verts={self.verts!r}, edges={self.edges!r}, "
            f"faces={self.faces!r}, loops={self.loops!r})"
        )
