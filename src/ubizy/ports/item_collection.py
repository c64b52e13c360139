"""Item collection interface."""

from typing import Iterator, Protocol, TypeVar

T = TypeVar("T")


class ItemCollection(Protocol[T]):
    """Interface for a backing collection of items keyed by their id."""

    def get(self, item_id: str) -> T | None:
        """Return the item with this id, or None."""
        ...

    def put(self, item: T) -> None:
        """Insert or replace an item under its id."""
        ...

    def remove(self, item_id: str) -> bool:
        """Remove an item. Returns False if it was not there."""
        ...

    def values(self) -> list[T]:
        """All items, in insertion order."""
        ...

    def __len__(self) -> int:
        ...

    def __contains__(self, item_id: object) -> bool:
        ...

    def __iter__(self) -> Iterator[T]:
        ...
