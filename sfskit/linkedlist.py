"""A circular doubly linked list whose head is itself an entry."""

from collections.abc import Iterator
from typing import Any, Optional

__all__ = ["ListEntry"]


class ListEntry:
    """A node of a circular doubly linked list; a lone entry is an empty list."""

    __slots__ = ("value", "prev", "next")

    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.prev: "ListEntry" = self
        self.next: "ListEntry" = self

    def _link(self, prev: "ListEntry", nxt: "ListEntry") -> None:
        prev.next = nxt.prev = self
        self.next = nxt
        self.prev = prev

    def add(self, elm: "ListEntry") -> None:
        """Insert ``elm`` directly after this entry."""
        self.add_after(elm)

    def add_before(self, elm: "ListEntry") -> None:
        """Insert ``elm`` directly before this entry."""
        elm._link(self.prev, self)

    def add_after(self, elm: "ListEntry") -> None:
        """Insert ``elm`` directly after this entry."""
        elm._link(self, self.next)

    def remove(self) -> None:
        """Unlink this entry; its own links are left as they were."""
        self.prev.next = self.next
        self.next.prev = self.prev

    def remove_init(self) -> None:
        """Unlink this entry and make it an empty list of its own."""
        self.remove()
        self.prev = self.next = self

    def empty(self) -> bool:
        """True if no other entry is linked to this one."""
        return self.next is self

    def __iter__(self) -> Iterator["ListEntry"]:
        """Yield the other entries, starting after this one."""
        entry: Optional[ListEntry] = self.next
        while entry is not self:
            yield entry
            entry = entry.next

    def __repr__(self) -> str:
        return f"ListEntry({self.value!r})"