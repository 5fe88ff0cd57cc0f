from collections.abc import MutableMapping
from typing import Generic, Iterator, TypeVar, overload

KT = TypeVar("KT")
VT = TypeVar("VT")


### Ordered map with iLoc functionality


class OrderedMap(MutableMapping[KT, VT]):
    """Insertion-ordered mapping with constant time lookup by key and by position.

    Setting an existing key replaces its value in place (the position is kept).
    Positional access goes through ``iloc``, e.g. ``items.iloc[0]`` for the first
    (key, value) pair or ``items.iloc[-1]`` for the last.
    """

    def __init__(self, *args, **kwargs) -> None:
        self._data: dict[KT, VT] = {}
        self._keys: list[KT] = []
        self.iloc: _iLocIndexer[KT, VT] = _iLocIndexer(self)
        self.update(*args, **kwargs)

    def __getitem__(self, key: KT) -> VT:
        return self._data[key]

    def __setitem__(self, key: KT, value: VT) -> None:
        if key not in self._data:
            self._keys.append(key)
        self._data[key] = value

    def __delitem__(self, key: KT) -> None:
        del self._data[key]
        self._keys.remove(key)

    def __iter__(self) -> Iterator[KT]:
        return iter(tuple(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.items())!r})"

    def index(self, key: KT) -> int:
        """Position of key.

        Args:
            key (KT): The key to search for.

        Raises:
            KeyError: If key doesn't exist.

        Returns:
            int: The 0-based position.
        """
        if key not in self._data:
            raise KeyError(key)
        return self._keys.index(key)

    def clear(self) -> None:
        self._data.clear()
        self._keys.clear()


class _iLocIndexer(Generic[KT, VT]):

    def __init__(self, target: OrderedMap[KT, VT]) -> None:
        self.target = target

    @overload
    def __getitem__(self, index: int) -> tuple[KT, VT]: ...

    @overload
    def __getitem__(self, index: slice) -> list[tuple[KT, VT]]: ...

    def __getitem__(self, index: int | slice) -> list[tuple[KT, VT]] | tuple[KT, VT]:
        keys = self.target._keys
        if isinstance(index, slice):
            return [(k, self.target._data[k]) for k in keys[index]]
        if not isinstance(index, int):
            raise TypeError("index must be of type int or slice.")
        try:
            key = keys[index]
        except IndexError:
            raise IndexError("OrderedMap index out of range") from None
        return key, self.target._data[key]

    def __setitem__(self, index: int, value: VT) -> None:
        key, _ = self[index]
        self.target._data[key] = value
