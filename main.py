import argparse
import logging
import os
import sys

import numpy as np

from editable_mesh import __version__
from geometry.mesh_io import load_data, parse_mesh, save_mesh, save_render_mesh
from runtime.logging_config import setup_logging
from runtime.selection import (
    SelectionMode,
    apply_selection,
    translate_selection,
)

logger = logging.getLogger("editable_mesh")

_MESH_SUFFIXES = (".json", ".yaml", ".yml")


def resolve_mesh_path(path: str) -> str:
    """Return a valid mesh file path, allowing path without extension."""
    if os.path.isfile(path):
        return path
    if not path.lower().endswith(_MESH_SUFFIXES):
        for suffix in _MESH_SUFFIXES:
            alt = path + suffix
            if os.path.isfile(alt):
                return alt
    raise FileNotFoundError(f"Cannot find file '{path}' or '{path}.json'")


def parse_vector(text: str) -> np.ndarray:
    parts = [p for p in text.replace(" ", "").split(",") if p]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected DX,DY,DZ, got {text!r}")
    try:
        return np.array([float(p) for p in parts])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_selection(text: str):
    """Parse ``MODE:ID,ID,...`` (e.g. ``face:0,3``)."""
    mode_text, sep, ids_text = text.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected MODE:IDS, got {text!r}")
    try:
        mode = SelectionMode.parse(mode_text)
        ids = [int(i) for i in ids_text.split(",") if i.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return mode, ids


def print_properties(mesh, render_mesh) -> None:
    print("=== Mesh Properties ===")
    print(f"Vertices: {mesh.num_vertices}")
    print(f"Edges: {mesh.num_edges}")
    print(f"Faces: {mesh.num_faces}")
    print(f"Loops: {mesh.num_loops}")
    arities = {}
    for f_id in mesh.faces.alive_ids():
        n = mesh.faces[f_id].loop_count
        arities[n] = arities.get(n, 0) + 1
    for n in sorted(arities):
        print(f"  {n}-sided faces: {arities[n]}")
    print(f"Render vertices: {render_mesh.vertex_count}")
    print(f"Render triangles: {render_mesh.triangle_count}")
    print(f"Submeshes (materials): {render_mesh.material_indices}")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Editable mesh conversion driver")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-i", "--input", help="Input mesh JSON/YAML file")
    parser.add_argument(
        "-o", "--output", default=None, help="Output render mesh JSON/YAML file"
    )
    parser.add_argument(
        "--save-polygons",
        action="store_true",
        help="Write the editable polygon mesh to --output instead of the baked render mesh.",
    )
    parser.add_argument(
        "--select",
        type=parse_selection,
        default=None,
        help="Select elements before editing, e.g. 'vertex:0,1' or 'face:2'.",
    )
    parser.add_argument(
        "--translate",
        type=parse_vector,
        default=None,
        help="Move the selected elements by DX,DY,DZ.",
    )
    parser.add_argument(
        "--properties",
        action="store_true",
        help="Print element counts and bake statistics.",
    )
    parser.add_argument(
        "--compact-output-json",
        action="store_true",
        help="Write output JSON in compact (single-line) form.",
    )
    parser.add_argument(
        "--viz", action="store_true", help="Visualize the mesh after editing."
    )
    parser.add_argument(
        "--viz-save",
        default=None,
        help="Save the visualization image to PATH instead of only showing it.",
    )
    parser.add_argument("--log", default=None, help="Optional log file")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress console output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable verbose debug logging"
    )
    return parser


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.input:
        print("No input file provided.", file=sys.stderr)
        return 1
    try:
        args.input = resolve_mesh_path(args.input)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return 1

    global logger
    logger = setup_logging(args.log, quiet=args.quiet, debug=args.debug)

    data = load_data(args.input)
    mesh, params = parse_mesh(data)
    logger.info("Loaded %s", mesh)

    mode = SelectionMode.parse(params.selection_mode)
    if args.select is not None:
        mode, ids = args.select
        for i, element_id in enumerate(ids):
            apply_selection(mesh, mode, element_id, toggle=i > 0)
        table = {
            SelectionMode.VERTEX: mesh.verts,
            SelectionMode.EDGE: mesh.edges,
            SelectionMode.FACE: mesh.faces,
        }[mode]
        missing = [i for i in ids if not table.is_alive(i)]
        if missing:
            logger.warning("Ignoring unknown %s ids: %s", mode.value, missing)

    if args.translate is not None:
        moved = translate_selection(mesh, mode, args.translate)
        if moved == 0:
            logger.warning("Nothing selected in %s mode; translation skipped.", mode.value)
        else:
            logger.info("Moved %d vertices by %s", moved, args.translate.tolist())

    render_mesh = mesh.bake_to_render_mesh()

    if args.properties:
        print_properties(mesh, render_mesh)

    if args.viz or args.viz_save:
        import matplotlib.pyplot as plt

        from visualization.plotting import plot_mesh

        plot_mesh(mesh, show=args.viz_save is None)
        if args.viz_save:
            plt.gcf().savefig(args.viz_save, bbox_inches="tight")
            logger.info("Saved visualization to %s", args.viz_save)

    if args.output:
        compact = args.compact_output_json or bool(params.compact_output_json)
        if args.save_polygons:
            save_mesh(mesh, args.output, params=params, compact=compact)
        else:
            save_render_mesh(render_mesh, args.output, compact=compact)

    return 0


if __name__ == "__main__":
    sys.exit(main())
