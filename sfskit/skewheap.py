"""An intrusive skew heap plus a small value-holding wrapper around it."""

from collections.abc import Callable
from typing import Any, Optional

__all__ = ["SkewHeapNode", "SkewHeap", "merge", "insert", "remove"]

Compare = Callable[[Any, Any], int]


class SkewHeapNode:
    """A heap node carrying a value and its tree links."""

    __slots__ = ("value", "parent", "left", "right")

    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.parent: Optional[SkewHeapNode] = None
        self.left: Optional[SkewHeapNode] = None
        self.right: Optional[SkewHeapNode] = None

    def __repr__(self) -> str:
        return f"SkewHeapNode({self.value!r})"


def merge(
    a: Optional[SkewHeapNode], b: Optional[SkewHeapNode], comp: Compare
) -> Optional[SkewHeapNode]:
    """Merge two heaps and return the new root.

    ``comp`` receives two values; the first heap's root wins only when it
    returns -1, so ties go to the second heap.
    """
    path: list[SkewHeapNode] = []
    while a is not None and b is not None:
        if comp(a.value, b.value) == -1:
            path.append(a)
            a = a.right
        else:
            path.append(b)
            b = b.right
    tail = a if b is None else b
    for node in reversed(path):
        node.right = node.left
        node.left = tail
        if tail is not None:
            tail.parent = node
        tail = node
    return tail


def insert(
    a: Optional[SkewHeapNode], b: SkewHeapNode, comp: Compare
) -> Optional[SkewHeapNode]:
    """Reset ``b``'s links, add it to heap ``a`` and return the new root."""
    b.parent = b.left = b.right = None
    return merge(a, b, comp)


def remove(
    a: Optional[SkewHeapNode], b: SkewHeapNode, comp: Compare
) -> Optional[SkewHeapNode]:
    """Take node ``b`` out of heap ``a`` and return the new root."""
    parent = b.parent
    rep = merge(b.left, b.right, comp)
    if rep is not None:
        rep.parent = parent
    if parent is None:
        return rep
    if parent.left is b:
        parent.left = rep
    else:
        parent.right = rep
    return a


def _natural(x: Any, y: Any) -> int:
    if x < y:
        return -1
    if x == y:
        return 0
    return 1


class SkewHeap:
    """A priority queue; the value ordered first by ``comp`` comes out first."""

    def __init__(self, comp: Optional[Compare] = None) -> None:
        self._comp: Compare = comp if comp is not None else _natural
        self._root: Optional[SkewHeapNode] = None
        self._size = 0

    def push(self, value: Any) -> SkewHeapNode:
        """Add a value and return the node that holds it."""
        node = SkewHeapNode(value)
        self._root = insert(self._root, node, self._comp)
        self._size += 1
        return node

    def pop(self) -> Any:
        """Remove and return the first value."""
        if self._root is None:
            raise IndexError("pop from an empty heap")
        node = self._root
        self._root = remove(self._root, node, self._comp)
        self._size -= 1
        return node.value

    def peek(self) -> Any:
        """Return the first value without removing it."""
        if self._root is None:
            raise IndexError("peek at an empty heap")
        return self._root.value

    def __len__(self) -> int:
        return self._size