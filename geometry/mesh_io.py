# mesh_io.py
import json
import logging
from pathlib import Path
from typing import Tuple

import numpy as np
import yaml

from core.exceptions import InvalidFaceError
from geometry.editable_mesh import EditableMesh
from geometry.render_mesh import RenderMesh
from parameters.global_parameters import GlobalParameters
from runtime.selection import SelectionMode, apply_selection, selected_elements

logger = logging.getLogger("editable_mesh")


def load_data(filename):
    """Load a mesh document from a JSON or YAML file.

    Two layouts are accepted. A render mesh:
    {
        "vertices": [[x, y, z], ...],
        "uv0": [[u, v], ...],              # optional, one per vertex
        "submeshes": [[i, j, k, ...], ...]  # flat triangle lists
    }
    or a polygon mesh:
    {
        "vertices": [[x, y, z], ...],
        "faces": [
            [i, j, k, ...] or [i, j, k, ..., {"material_index": 1, "uv": [[u, v], ...]}],
            ...
        ]
    }
    Both may carry "global_parameters" and "selection": {"mode": ..., "ids": [...]};
    an edge selection may name edges by endpoints with "pairs": [[a, b], ...].
    """
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ValueError(f"Unsupported file format for: {filename_str}")

    return data


def _split_face_entry(entry):
    if entry and isinstance(entry[-1], dict):
        return list(entry[:-1]), entry[-1]
    return list(entry), {}


def parse_mesh(data: dict) -> Tuple[EditableMesh, GlobalParameters]:
    params = GlobalParameters()
    params.update(data.get("global_parameters") or {})

    mesh = EditableMesh()
    vertices = data.get("vertices") or []

    if "faces" in data and "submeshes" not in data:
        for pos in vertices:
            mesh.add_vertex(pos)

        default_material = int(params.get("default_material_index", 0))
        for f_idx, entry in enumerate(data.get("faces") or []):
            face_verts, options = _split_face_entry(entry)
            try:
                mesh.add_face(
                    face_verts,
                    int(options.get("material_index", default_material)),
                    options.get("uv"),
                )
            except InvalidFaceError:
                logger.error("Face %d has fewer than 3 vertices: %r", f_idx, entry)
                raise
    else:
        mesh = EditableMesh.from_render_mesh(RenderMesh.from_dict(data))

    selection = data.get("selection")
    if selection:
        mode = SelectionMode.parse(selection.get("mode", params.selection_mode))
        params.set("selection_mode", mode.value)
        element_ids = [int(i) for i in selection.get("ids", [])]
        if mode is SelectionMode.EDGE:
            for a, b in selection.get("pairs", []):
                e_id = mesh.edge_index.get(int(a), int(b))
                if e_id is None:
                    logger.warning(
                        "No edge joins selected vertices %s and %s.", a, b
                    )
                else:
                    element_ids.append(e_id)
        for i, element_id in enumerate(element_ids):
            apply_selection(mesh, mode, element_id, toggle=i > 0)

    logger.debug("Parsed %s", mesh)
    return mesh, params


def _dump(data, path, compact: bool) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(data, f, default_flow_style=compact, sort_keys=False)
        elif compact:
            json.dump(data, f, separators=(",", ":"), ensure_ascii=False)
        else:
            json.dump(data, f, indent=4, ensure_ascii=False)


def save_render_mesh(render_mesh: RenderMesh, path, *, compact: bool = False) -> None:
    _dump(render_mesh.to_dict(), path, compact)
    logger.info(
        "Saved render mesh (%d vertices, %d triangles) to %s",
        render_mesh.vertex_count,
        render_mesh.triangle_count,
        path,
    )


def save_mesh(
    mesh: EditableMesh,
    path,
    *,
    params: GlobalParameters | None = None,
    compact: bool = False,
) -> None:
    """Write ``mesh`` as a polygon document.

    Arena ids can be sparse after slots are freed and reused, while the file
    encodes vertex ids by list position, so vertices are renumbered to a
    contiguous range before writing.
    """
    vertex_ids = list(mesh.verts.alive_ids())
    vertex_id_map = {old: new for new, old in enumerate(vertex_ids)}

    faces = []
    face_rows = {}
    for f_id in mesh.faces.alive_ids():
        loop_ids = mesh.face_loops(f_id)
        face = mesh.faces[f_id]
        if len(loop_ids) != face.loop_count or face.loop_count < 3:
            logger.warning("Not saving face %d with a malformed loop ring.", f_id)
            continue
        entry = [vertex_id_map[mesh.loops[l].vert] for l in loop_ids]
        options = {}
        if face.material_index != 0:
            options["material_index"] = int(face.material_index)
        uvs = [mesh.loops[l].uv for l in loop_ids]
        if any(np.any(uv != 0.0) for uv in uvs):
            options["uv"] = [np.asarray(uv, dtype=float).tolist() for uv in uvs]
        if options:
            entry.append(options)
        face_rows[f_id] = len(faces)
        faces.append(entry)

    data = {
        "vertices": [mesh.verts[v].position.tolist() for v in vertex_ids],
        "faces": faces,
    }

    selections = []
    selected_vertices = [
        vertex_id_map[v] for v in selected_elements(mesh, SelectionMode.VERTEX)
    ]
    if selected_vertices:
        selections.append({"mode": "vertex", "ids": selected_vertices})
    selected_pairs = []
    for e_id in selected_elements(mesh, SelectionMode.EDGE):
        edge = mesh.edges[e_id]
        selected_pairs.append([vertex_id_map[edge.v0], vertex_id_map[edge.v1]])
    if selected_pairs:
        # Edge ids are not stable across a reload; endpoints are.
        selections.append({"mode": "edge", "pairs": selected_pairs})
    selected_faces = [
        face_rows[f]
        for f in selected_elements(mesh, SelectionMode.FACE)
        if f in face_rows
    ]
    if selected_faces:
        selections.append({"mode": "face", "ids": selected_faces})

    if selections:
        data["selection"] = selections[0]
        if len(selections) > 1:
            logger.warning(
                "Only the %s selection is saved; dropping %s selection.",
                selections[0]["mode"],
                ", ".join(s["mode"] for s in selections[1:]),
            )

    if params is not None:
        data["global_parameters"] = params.to_dict()

    _dump(data, path, compact)
    logger.info("Saved mesh (%s) to %s", mesh, path)
