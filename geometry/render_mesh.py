"""Conversion between the editable topology and a flat triangulated render mesh.

A render mesh is what a GPU consumes: one position/UV pair per render vertex
and, per submesh, a flat list of triangle indices into those arrays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    from geometry.editable_mesh import EditableMesh

logger = logging.getLogger("editable_mesh")

# Corner triples used to split a face into triangles, keyed by loop count.
# Quads use a fixed fan from corner 0.
_FACE_SPLITS: Dict[int, Tuple[Tuple[int, int, int], ...]] = {
    3: ((0, 1, 2),),
    4: ((0, 1, 2), (0, 2, 3)),
}


def _empty_positions() -> np.ndarray:
    return np.empty((0, 3), dtype=float)


def _empty_uvs() -> np.ndarray:
    return np.empty((0, 2), dtype=float)


@dataclass
class RenderMesh:
    positions: np.ndarray = field(default_factory=_empty_positions)
    uv0: Optional[np.ndarray] = field(default_factory=_empty_uvs)
    submeshes: List[np.ndarray] = field(default_factory=list)
    # Material index carried by each entry of ``submeshes``.
    material_indices: List[int] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return int(len(self.positions))

    @property
    def submesh_count(self) -> int:
        return len(self.submeshes)

    @property
    def triangle_count(self) -> int:
        return sum(len(tris) // 3 for tris in self.submeshes)

    def triangles_by_material(self) -> Dict[int, np.ndarray]:
        return {
            material: tris
            for material, tris in zip(self.material_indices, self.submeshes)
        }

    def to_dict(self) -> dict:
        return {
            "vertices": np.asarray(self.positions, dtype=float).tolist(),
            "uv0": (
                np.asarray(self.uv0, dtype=float).tolist()
                if self.uv0 is not None
                else []
            ),
            "submeshes": [np.asarray(t, dtype=int).tolist() for t in self.submeshes],
            "material_indices": [int(m) for m in self.material_indices],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RenderMesh":
        positions = np.asarray(data.get("vertices", []), dtype=float).reshape(-1, 3)
        raw_uv = data.get("uv0")
        uv0 = (
            np.asarray(raw_uv, dtype=float).reshape(-1, 2)
            if raw_uv is not None and len(raw_uv) > 0
            else None
        )
        submeshes = [
            np.asarray(tris, dtype=np.int32).reshape(-1)
            for tris in data.get("submeshes", [])
        ]
        materials = data.get("material_indices")
        if materials is None:
            materials = list(range(len(submeshes)))
        if len(materials) != len(submeshes):
            raise ValueError(
                f"material_indices has {len(materials)} entries for "
                f"{len(submeshes)} submeshes."
            )
        return cls(
            positions=positions,
            uv0=uv0,
            submeshes=submeshes,
            material_indices=[int(m) for m in materials],
        )


def remap_submesh_materials(
    mesh: "EditableMesh", material_indices: Sequence[int]
) -> None:
    """Replace submesh positions on faces with the materials they stand for.

    Faces loaded from a render mesh carry their submesh index; a baked render
    mesh records the real material of each submesh in ``material_indices``.
    """
    lookup = [int(m) for m in material_indices]
    for face in mesh.faces:
        if 0 <= face.material_index < len(lookup):
            face.material_index = lookup[face.material_index]


def load_from_render_mesh(
    mesh: "EditableMesh",
    positions,
    uv0=None,
    submesh_triangles: Sequence = (),
) -> None:
    """Replace the contents of ``mesh`` with the given render mesh.

    Every input position becomes one vertex (coincident positions are not
    merged) and every index triple becomes a triangle face whose material
    index is its submesh index. UVs are copied per corner when ``uv0`` has one
    entry per position.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    n_verts = len(positions)

    mesh.clear()
    for pos in positions:
        mesh.add_vertex(pos)

    uvs = None
    if uv0 is not None and len(uv0) > 0:
        uv_arr = np.asarray(uv0, dtype=float).reshape(-1, 2)
        if len(uv_arr) == n_verts:
            uvs = uv_arr
        else:
            logger.warning(
                "Ignoring uv0: %d entries for %d vertices.", len(uv_arr), n_verts
            )

    skipped = 0
    for submesh, triangles in enumerate(submesh_triangles):
        indices = np.asarray(triangles, dtype=int).reshape(-1)
        for i in range(0, len(indices) - 2, 3):
            face_verts = [int(v) for v in indices[i : i + 3]]
            if any(v < 0 or v >= n_verts for v in face_verts):
                skipped += 1
                continue
            face_uvs = uvs[face_verts] if uvs is not None else None
            mesh.add_face(face_verts, submesh, face_uvs)

    if skipped:
        logger.warning(
            "Skipped %d triangles referencing vertices outside 0..%d.",
            skipped,
            n_verts - 1,
        )

    mesh.rebuild_edge_index()
    logger.debug(
        "Loaded render mesh: %d vertices, %d faces, %d edges.",
        mesh.num_vertices,
        mesh.num_faces,
        mesh.num_edges,
    )


def bake_to_render_mesh(mesh: "EditableMesh") -> RenderMesh:
    """Flatten ``mesh`` into a deduplicated render mesh.

    Triangles and quads are emitted; other arities and faces with a broken
    ring emit no triangles, but their material still gets a (possibly empty)
    submesh. Render vertices are shared between corners with the same
    topology vertex, UV and material.
    """
    positions: List[np.ndarray] = []
    uvs: List[np.ndarray] = []
    vertex_map: Dict[tuple, int] = {}
    by_material: Dict[int, List[int]] = {}
    skipped = 0

    def render_vertex_index(loop_id: int, material_index: int) -> int:
        loop = mesh.loops[loop_id]
        uv = (float(loop.uv[0]), float(loop.uv[1]))
        key = (loop.vert, uv, material_index)
        existing = vertex_map.get(key)
        if existing is not None:
            return existing

        index = len(positions)
        positions.append(mesh.verts[loop.vert].position)
        uvs.append(loop.uv)
        vertex_map[key] = index
        return index

    for f_id in mesh.faces.alive_ids():
        face = mesh.faces[f_id]
        if face.any_loop is None or face.loop_count < 3:
            skipped += 1
            continue

        # Every face with a ring claims a submesh, even if it emits nothing.
        material_index = face.material_index
        triangles = by_material.setdefault(material_index, [])

        splits = _FACE_SPLITS.get(face.loop_count)
        if splits is None:
            skipped += 1
            continue

        loop_ids = mesh.face_loops(f_id)
        if len(loop_ids) != face.loop_count:
            skipped += 1
            continue

        for corners in splits:
            for corner in corners:
                triangles.append(render_vertex_index(loop_ids[corner], material_index))

    if skipped:
        logger.debug("Bake skipped %d faces that are not triangles or quads.", skipped)

    material_indices = sorted(by_material)
    render_mesh = RenderMesh(
        positions=np.array(positions, dtype=float).reshape(-1, 3),
        uv0=np.array(uvs, dtype=float).reshape(-1, 2),
        submeshes=[np.array(by_material[m], dtype=np.int32) for m in material_indices],
        material_indices=material_indices,
    )
    logger.debug(
        "Baked %d render vertices, %d triangles in %d submeshes.",
        render_mesh.vertex_count,
        render_mesh.triangle_count,
        render_mesh.submesh_count,
    )
    return render_mesh
