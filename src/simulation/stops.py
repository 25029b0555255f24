from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Iterator, List, Optional, Tuple


class StopSet:
    """Distinct floors kept in sorted order.

    Ascending sets iterate from the lowest floor, descending sets from the
    highest. ``first`` follows the iteration order.
    """

    def __init__(self, descending: bool = False) -> None:
        self.descending = descending
        self._floors: List[int] = []

    def add(self, floor: int) -> None:
        index = bisect_left(self._floors, floor)
        if index == len(self._floors) or self._floors[index] != floor:
            self._floors.insert(index, floor)

    def discard(self, floor: int) -> None:
        index = bisect_left(self._floors, floor)
        if index < len(self._floors) and self._floors[index] == floor:
            del self._floors[index]

    def clear(self) -> None:
        self._floors.clear()

    def first(self) -> int:
        if not self._floors:
            raise KeyError("first() on empty StopSet")
        return self._floors[-1] if self.descending else self._floors[0]

    def at_or_above(self, floor: int) -> Optional[int]:
        index = bisect_left(self._floors, floor)
        if index < len(self._floors):
            return self._floors[index]
        return None

    def at_or_below(self, floor: int) -> Optional[int]:
        index = bisect_right(self._floors, floor)
        if index:
            return self._floors[index - 1]
        return None

    def nearest(self, floor: int) -> int:
        """Next stop reached when sweeping from ``floor`` in this set's order.

        Falls back to ``first()`` when every stop lies behind the sweep.
        """

        candidate = self.at_or_below(floor) if self.descending else self.at_or_above(floor)
        return self.first() if candidate is None else candidate

    def as_tuple(self) -> Tuple[int, ...]:
        return tuple(self)

    def __contains__(self, floor: object) -> bool:
        if not isinstance(floor, int):
            return False
        index = bisect_left(self._floors, floor)
        return index < len(self._floors) and self._floors[index] == floor

    def __iter__(self) -> Iterator[int]:
        return reversed(self._floors) if self.descending else iter(self._floors)

    def __len__(self) -> int:
        return len(self._floors)

    def __bool__(self) -> bool:
        return bool(self._floors)

    def __repr__(self) -> str:
        return f"[{', '.join(str(floor) for floor in self)}]"
