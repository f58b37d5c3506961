from __future__ import annotations


class IdSequence:
    """Monotonic string ids; callers serialize access through the store lock."""

    def __init__(self, start: int = 1) -> None:
        self._next = max(1, int(start))

    def next_id(self) -> str:
        value = self._next
        self._next += 1
        return str(value)

    def advance_past(self, issued_id: str) -> None:
        try:
            issued = int(issued_id)
        except (TypeError, ValueError):
            return
        if issued >= self._next:
            self._next = issued + 1
