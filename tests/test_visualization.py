import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from geometry.editable_mesh import EditableMesh  # noqa: E402
from runtime.selection import SelectionMode, apply_selection  # noqa: E402
from sample_meshes import build_grid, write_sample_mesh  # noqa: E402
from visualization.plotting import (  # noqa: E402
    EDGE_COLOR,
    FACE_SELECTED_COLOR,
    plot_mesh,
)

import main as main_module  # noqa: E402


def test_plot_mesh_draws_faces_edges_and_vertices():
    mesh, _ = build_grid(2)
    apply_selection(mesh, SelectionMode.FACE, 0)

    ax = plot_mesh(mesh, show=False, show_indices=True, title="grid")

    assert ax.get_title() == "grid"
    polys, lines = ax.collections[0], ax.collections[1]
    face_colors = polys.get_facecolor()
    assert len(face_colors) == 4
    assert sum(np.allclose(c, FACE_SELECTED_COLOR) for c in face_colors) == 1
    assert tuple(lines.get_colors()[0]) == pytest.approx(EDGE_COLOR)
    assert len(ax.texts) == 9
    plt.close("all")


def test_plot_mesh_on_empty_mesh_returns_none(caplog):
    assert plot_mesh(EditableMesh(), show=False) is None
    assert "no vertices" in caplog.text


def test_main_viz_save_writes_image(tmp_path):
    mesh_path = write_sample_mesh(tmp_path)
    image = tmp_path / "mesh.png"
    assert main_module.main(["-i", mesh_path, "--viz-save", str(image), "-q"]) == 0
    assert image.exists()
    plt.close("all")
