"""Fixed-capacity in-memory cache."""

from collections import OrderedDict


class BoundedCache[K, V]:
    """Mapping that holds at most ``capacity`` items.

    Inserting into a full cache evicts the oldest entry.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> V | None:
        return self._items.get(key)

    def put(self, key: K, value: V) -> None:
        if key in self._items:
            self._items[key] = value
            return
        if len(self._items) >= self.capacity:
            self._items.popitem(last=False)
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
