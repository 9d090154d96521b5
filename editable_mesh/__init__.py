"""Package utilities for editable-mesh.

The kernel itself lives in top-level packages like `core/`, `geometry/` and
`runtime/`. This package exists to expose the installed distribution version.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("editable-mesh")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
