"""Pytest configuration and test categorization.

Tests live in a flat `tests/` layout and are categorized into `unit` and
`e2e` via markers so CI can run targeted subsets.
"""

from __future__ import annotations

import os
import pathlib
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast kernel-level tests")
    config.addinivalue_line("markers", "e2e: command-line and file round trips")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-apply test category markers based on filename conventions."""
    for item in items:
        path = pathlib.Path(str(item.fspath))
        name = path.name.lower()

        if "e2e" in name or "cli" in name:
            item.add_marker(pytest.mark.e2e)
            continue

        item.add_marker(pytest.mark.unit)
