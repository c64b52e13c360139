"""In-memory item collection adapter."""

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class InMemoryCollection(Generic[T]):
    """
    Dict-backed item collection.

    Implements ItemCollection protocol. Items are keyed by their `id`
    attribute and kept in insertion order. State lives only as long as the
    object does.
    """

    def __init__(self, items: list[T] | None = None):
        self._items: dict[str, T] = {}
        for item in items or []:
            self.put(item)

    def get(self, item_id: str) -> T | None:
        return self._items.get(item_id)

    def put(self, item: T) -> None:
        self._items[item.id] = item

    def remove(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def values(self) -> list[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())
