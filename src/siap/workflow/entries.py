from __future__ import annotations


class EntryList:
    """An ordered list of short entries plus the text buffer used to type the next one.

    The list is shared with the owning draft, so appends and removals show up on the
    draft directly. Duplicates are kept; blank entries are never appended.
    """

    def __init__(self, items: list[str]):
        self._items = items
        self.buffer = ""

    @property
    def items(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, text: str | None = None) -> bool:
        """Append `text` (or the buffer) and clear the buffer; False if blank."""
        value = (self.buffer if text is None else text).strip()
        if not value:
            return False
        self._items.append(value)
        self.buffer = ""
        return True

    def commit(self) -> bool:
        """Enter-key path; identical to `add()` with the buffer."""
        return self.add()

    def remove(self, index: int) -> str:
        """Remove exactly the entry at `index` (IndexError when out of range)."""
        if index < 0 or index >= len(self._items):
            raise IndexError(f"entry index {index} out of range")
        return self._items.pop(index)
