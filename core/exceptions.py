"""Custom exception types for the editable mesh kernel."""

from __future__ import annotations


class MeshKernelError(Exception):
    """Base class for domain-specific errors."""


class InvalidFaceError(MeshKernelError, ValueError):
    """Raised when a face is requested with fewer than three vertices."""

    def __init__(self, vertex_count: int, message: str | None = None) -> None:
        if message is None:
            message = f"Face needs at least 3 verts, got {vertex_count}."
        super().__init__(message)
        self.vertex_count = vertex_count


class InvalidElementIdError(MeshKernelError, IndexError):
    """Raised when accessing an arena slot that is freed or out of range."""

    def __init__(self, index, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Element id {index!r} does not refer to a live slot. "
                "Check is_alive() before dereferencing ids."
            )
        super().__init__(message)
        self.index = index


__all__ = ["MeshKernelError", "InvalidFaceError", "InvalidElementIdError"]
