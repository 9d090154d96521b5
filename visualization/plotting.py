import logging
from typing import Optional

import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Line3DCollection, Poly3DCollection

from geometry.editable_mesh import EditableMesh
from geometry.entities import is_selected

logger = logging.getLogger("editable_mesh")

EDGE_COLOR = (0.6, 0.6, 0.6, 0.9)
EDGE_SELECTED_COLOR = (1.0, 0.8, 0.2, 1.0)
VERTEX_COLOR = (0.2, 0.9, 1.0, 0.9)
VERTEX_SELECTED_COLOR = (1.0, 0.4, 0.1, 1.0)
FACE_COLOR = (0.2, 0.6, 0.9, 0.35)
FACE_SELECTED_COLOR = (1.0, 0.6, 0.1, 0.6)


def plot_mesh(
    mesh: EditableMesh,
    ax=None,
    show_indices: bool = False,
    draw_faces: bool = True,
    draw_edges: bool = True,
    draw_vertices: bool = True,
    title: Optional[str] = None,
    no_axes: bool = False,
    show: bool = True,
):
    """
    Draw an editable mesh in 3D using Matplotlib.

    Selected vertices, edges and faces are drawn in the highlight colours;
    everything else in the neutral ones.

    Parameters
    ----------
    mesh :
        The :class:`~geometry.editable_mesh.EditableMesh` to draw.
    ax : mpl_toolkits.mplot3d.Axes3D, optional
        Axis to draw into. If omitted, a new figure and axis are created.
    show_indices : bool, optional
        If ``True``, annotate vertices with their ids.
    draw_faces, draw_edges, draw_vertices : bool, optional
        Toggle each element layer.
    show : bool, optional
        If ``True`` (default), call :func:`matplotlib.pyplot.show` after
        drawing. Set to ``False`` for non-interactive backends or when the
        caller saves the figure.

    Returns
    -------
    The axis drawn into, or ``None`` when the mesh has no vertices.
    """
    if mesh.num_vertices == 0:
        logger.warning("Mesh has no vertices to visualize.")
        return None

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")

    if draw_faces:
        polygons = []
        face_colors = []
        for f_id in mesh.faces.alive_ids():
            v_ids = mesh.face_vertices(f_id)
            if len(v_ids) < 3:
                continue
            polygons.append(mesh.vertex_positions(v_ids))
            selected = is_selected(mesh.faces[f_id].flags)
            face_colors.append(FACE_SELECTED_COLOR if selected else FACE_COLOR)

        if polygons:
            collection = Poly3DCollection(polygons, linewidths=0.0)
            collection.set_facecolor(face_colors)
            ax.add_collection3d(collection)

    if draw_edges and mesh.num_edges:
        segments = []
        line_colors = []
        for e_id in mesh.edges.alive_ids():
            edge = mesh.edges[e_id]
            segments.append(mesh.vertex_positions((edge.v0, edge.v1)))
            selected = is_selected(edge.flags)
            line_colors.append(EDGE_SELECTED_COLOR if selected else EDGE_COLOR)

        ax.add_collection3d(
            Line3DCollection(segments, colors=line_colors, linewidths=0.8)
        )

    positions = mesh.vertex_positions()
    v_ids = list(mesh.verts.alive_ids())

    if draw_vertices:
        colors = [
            VERTEX_SELECTED_COLOR if is_selected(mesh.verts[v].flags) else VERTEX_COLOR
            for v in v_ids
        ]
        ax.scatter(positions[:, 0], positions[:, 1], positions[:, 2], c=colors, s=20)

    if show_indices:
        for v_id, pos in zip(v_ids, positions):
            ax.text(*pos, f"{v_id}", color="k", fontsize=8)

    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title(title or str(mesh))

    # Equal aspect ratio around the bounding box centre.
    lo = positions.min(axis=0)
    hi = positions.max(axis=0)
    max_range = max(float((hi - lo).max()), 1e-9)
    mid = 0.5 * (hi + lo)
    ax.set_xlim(mid[0] - max_range / 2, mid[0] + max_range / 2)
    ax.set_ylim(mid[1] - max_range / 2, mid[1] + max_range / 2)
    ax.set_zlim(mid[2] - max_range / 2, mid[2] + max_range / 2)

    if no_axes:
        ax.set_axis_off()

    plt.tight_layout()

    if show:
        plt.show()
    return ax
