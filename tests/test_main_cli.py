import json
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import main as main_module
from sample_meshes import render_mesh_input, write_sample_mesh


def run_main(args):
    return main_module.main(list(args) + ["-q"])


def test_main_properties_mode_runs(tmp_path, capsys):
    mesh_path = write_sample_mesh(tmp_path)
    assert run_main(["-i", mesh_path, "--properties"]) == 0

    out = capsys.readouterr().out
    assert "=== Mesh Properties ===" in out
    assert "Vertices: 8" in out
    assert "4-sided faces: 6" in out
    assert "Render triangles: 12" in out


def test_main_resolves_path_without_extension(tmp_path, capsys):
    write_sample_mesh(tmp_path, name="cube.json")
    assert run_main(["-i", str(tmp_path / "cube"), "--properties"]) == 0
    assert "Edges: 12" in capsys.readouterr().out


def test_main_missing_input_returns_error(tmp_path, capsys):
    assert run_main([]) == 1
    assert run_main(["-i", str(tmp_path / "nope.json")]) == 1
    assert "Cannot find file" in capsys.readouterr().err


def test_main_writes_baked_render_mesh(tmp_path):
    mesh_path = tmp_path / "render.json"
    mesh_path.write_text(json.dumps(render_mesh_input()))
    out_path = tmp_path / "baked.json"

    assert run_main(["-i", str(mesh_path), "-o", str(out_path)]) == 0

    baked = json.loads(out_path.read_text())
    assert len(baked["vertices"]) == 4
    assert sorted(baked["submeshes"][0]) == [0, 0, 1, 2, 2, 3]
    assert baked["material_indices"] == [0]


def test_main_select_and_translate_then_save_polygons(tmp_path):
    mesh_path = write_sample_mesh(tmp_path)
    out_path = tmp_path / "moved.json"

    code = run_main(
        [
            "-i",
            mesh_path,
            "--select",
            "face:1",
            "--translate",
            "0,0,2",
            "--save-polygons",
            "-o",
            str(out_path),
        ]
    )
    assert code == 0

    saved = json.loads(out_path.read_text())
    zs = sorted(v[2] for v in saved["vertices"])
    assert zs == [0.0] * 4 + [3.0] * 4
    assert saved["selection"] == {"mode": "face", "ids": [1]}


def test_main_unknown_selection_ids_warn(tmp_path, caplog):
    mesh_path = write_sample_mesh(tmp_path)
    with caplog.at_level("WARNING"):
        assert run_main(["-i", mesh_path, "--select", "vertex:0,99"]) == 0
    assert "Ignoring unknown vertex ids: [99]" in caplog.text


def test_main_rejects_malformed_arguments(tmp_path):
    mesh_path = write_sample_mesh(tmp_path)
    with pytest.raises(SystemExit):
        main_module.main(["-i", mesh_path, "--translate", "1,2"])
    with pytest.raises(SystemExit):
        main_module.main(["-i", mesh_path, "--select", "loop:1"])


def test_main_compact_output(tmp_path):
    mesh_path = write_sample_mesh(tmp_path)
    out_path = tmp_path / "baked.json"
    assert run_main(["-i", mesh_path, "-o", str(out_path), "--compact-output-json"]) == 0
    assert "\n" not in out_path.read_text()


def test_main_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip()
