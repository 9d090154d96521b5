from __future__ import annotations

from setuptools import find_namespace_packages, setup

setup(
    name="editable-mesh",
    version="0.1.0",
    description="Editable polygon-mesh topology kernel with render-mesh conversion",
    python_requires=">=3.10",
    packages=find_namespace_packages(
        include=[
            "core",
            "geometry",
            "parameters",
            "runtime",
            "visualization",
            "editable_mesh",
        ]
    ),
    py_modules=["main"],
    install_requires=[
        "numpy",
        "PyYAML",
        "matplotlib",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["editable-mesh=main:main"]},
)
