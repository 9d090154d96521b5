from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, Optional, TypeVar

from core.exceptions import InvalidElementIdError

T = TypeVar("T")


class SlotList(Generic[T]):
    """Stable-index storage with free-list reuse.

    Ids are plain non-negative integers. A freed id goes on a LIFO stack and is
    handed back by the next ``allocate``; ids carry no generation tag, so a
    caller holding an id across a free/allocate pair sees the new occupant.
    """

    def __init__(self) -> None:
        self._items: list[Optional[T]] = []
        self._alive: list[bool] = []
        self._free: list[int] = []

    @property
    def capacity(self) -> int:
        """Number of slots ever allocated (alive + dead)."""
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items) - len(self._free)

    def is_alive(self, index: Optional[int]) -> bool:
        if index is None or index < 0:
            return False
        return index < len(self._alive) and self._alive[index]

    def allocate(self) -> int:
        if self._free:
            index = self._free.pop()
            # Reused slots start empty; the caller writes the new record.
            self._items[index] = None
            self._alive[index] = True
            return index

        index = len(self._items)
        self._items.append(None)
        self._alive.append(True)
        return index

    def free(self, index: int) -> None:
        if not self.is_alive(index):
            return
        self._alive[index] = False
        self._free.append(index)

    def copy(self) -> "SlotList[T]":
        """Independent copy; live records are duplicated with their ``copy()``."""
        new = SlotList()
        new._items = [
            item.copy() if alive and item is not None else None
            for item, alive in zip(self._items, self._alive)
        ]
        new._alive = list(self._alive)
        new._free = list(self._free)
        return new

    def clear(self) -> None:
        self._items.clear()
        self._alive.clear()
        self._free.clear()

    def alive_ids(self) -> Iterator[int]:
        """Yield live ids in ascending order."""
        for index, alive in enumerate(self._alive):
            if alive:
                yield index

    def __getitem__(self, index: int) -> T:
        if not self.is_alive(index):
            raise InvalidElementIdError(index)
        return self._items[index]

    def __setitem__(self, index: int, value: T) -> None:
        if not self.is_alive(index):
            raise InvalidElementIdError(index)
        self._items[index] = value

    def __iter__(self) -> Iterator[T]:
        for index in self.alive_ids():
            yield self._items[index]

    def __repr__(self) -> str:
        return f"SlotList(capacity={self.capacity}, alive={len(self)})"
