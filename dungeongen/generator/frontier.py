"""Open connector set — the unresolved connectors of placed modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from dungeongen.scene.adapter import Handle


@dataclass(frozen=True)
class OpenConnector:
    """Reference to connector *index* of the placed instance *handle*."""

    handle: Handle
    index: int


class Frontier:
    """Ordered sequence of open connectors.

    Insertion order matters: the depth-first heuristic resolves the most
    recently opened connector.  Every mutation returns what is needed to
    undo it exactly.
    """

    def __init__(self) -> None:
        self._items: list[OpenConnector] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[OpenConnector]:
        return iter(self._items)

    def __getitem__(self, i: int) -> OpenConnector:
        return self._items[i]

    def __contains__(self, conn: object) -> bool:
        return conn in self._items

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.handle}:{c.index}" for c in self._items)
        return f"Frontier([{inner}])"

    @property
    def last(self) -> OpenConnector:
        return self._items[-1]

    def clear(self) -> None:
        self._items.clear()

    def open_module(
        self, handle: Handle, connector_count: int, skip: int | None = None,
    ) -> list[OpenConnector]:
        """Append every connector of *handle* except *skip*; return the added ones."""
        added = [
            OpenConnector(handle, i)
            for i in range(connector_count)
            if i != skip
        ]
        self._items.extend(added)
        return added

    def remove(self, conn: OpenConnector) -> int:
        """Remove *conn* and return the index it occupied."""
        index = self._items.index(conn)
        del self._items[index]
        return index

    def insert(self, index: int, conn: OpenConnector) -> None:
        self._items.insert(index, conn)

    def discard_all(self, conns: list[OpenConnector]) -> None:
        """Remove every connector in *conns* that is still open."""
        drop = set(conns)
        self._items = [c for c in self._items if c not in drop]
