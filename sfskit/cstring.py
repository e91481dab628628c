"""NUL-terminated string and raw memory helpers with C semantics.

Strings may be given as ``str`` or as bytes-like objects. Each one ends at
its first NUL character or at the end of the object, whichever comes first.
"""

from collections.abc import Sequence
from typing import Optional, Union

__all__ = [
    "strnlen",
    "strcmp",
    "strncmp",
    "strchr",
    "strfind",
    "strtol",
    "memcmp",
    "memmove",
]

Text = Union[str, bytes, bytearray, memoryview]


def _codes(s: Text) -> Sequence[int]:
    """Return the character codes of ``s`` up to, not including, its first NUL."""
    if isinstance(s, str):
        codes: Sequence[int] = [ord(ch) for ch in s]
    else:
        codes = bytes(s)
    try:
        end = list(codes).index(0) if not isinstance(codes, bytes) else codes.index(0)
    except ValueError:
        return codes
    return codes[:end]


def _code(c: Union[str, int]) -> int:
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError("expected a single character")
        return ord(c)
    return int(c) & 0xFF


def _at(codes: Sequence[int], index: int) -> int:
    return codes[index] if index < len(codes) else 0


def strnlen(s: Text, length: int) -> int:
    """Length of ``s``, but at most ``length``."""
    return min(len(_codes(s)), max(0, length))


def strcmp(s1: Text, s2: Text) -> int:
    """Compare two strings; the sign of the result orders them."""
    a, b = _codes(s1), _codes(s2)
    i = 0
    while _at(a, i) != 0 and _at(a, i) == _at(b, i):
        i += 1
    return _at(a, i) - _at(b, i)


def strncmp(s1: Text, s2: Text, n: int) -> int:
    """Compare at most ``n`` characters of two strings."""
    a, b = _codes(s1), _codes(s2)
    i = 0
    while n > 0 and _at(a, i) != 0 and _at(a, i) == _at(b, i):
        n -= 1
        i += 1
    if n <= 0:
        return 0
    return _at(a, i) - _at(b, i)


def strchr(s: Text, c: Union[str, int]) -> Optional[int]:
    """Index of the first ``c`` in ``s``, or None if it does not occur."""
    target = _code(c)
    for index, code in enumerate(_codes(s)):
        if code == target:
            return index
    return None


def strfind(s: Text, c: Union[str, int]) -> int:
    """Index of the first ``c`` in ``s``, or the index of its terminator."""
    codes = _codes(s)
    found = strchr(s, c)
    return len(codes) if found is None else found


def _digit(code: int) -> Optional[int]:
    if ord("0") <= code <= ord("9"):
        return code - ord("0")
    if ord("a") <= code <= ord("z"):
        return code - ord("a") + 10
    if ord("A") <= code <= ord("Z"):
        return code - ord("A") + 10
    return None


def strtol(s: Text, base: int = 0) -> tuple[int, int]:
    """Parse an integer at the start of ``s``.

    Returns the value and the index of the first character not consumed.
    Only spaces and tabs are skipped; a base of 0 picks octal for a leading
    ``0``, hexadecimal for a leading ``0x`` and decimal otherwise.
    """
    codes = _codes(s)
    pos = 0
    while _at(codes, pos) in (ord(" "), ord("\t")):
        pos += 1

    negative = False
    if _at(codes, pos) == ord("+"):
        pos += 1
    elif _at(codes, pos) == ord("-"):
        pos += 1
        negative = True

    if base in (0, 16) and _at(codes, pos) == ord("0") and _at(codes, pos + 1) == ord("x"):
        pos += 2
        base = 16
    elif base == 0 and _at(codes, pos) == ord("0"):
        pos += 1
        base = 8
    elif base == 0:
        base = 10

    value = 0
    while True:
        dig = _digit(_at(codes, pos))
        if dig is None or dig >= base:
            break
        pos += 1
        value = value * base + dig

    return (-value if negative else value), pos


def memcmp(v1: bytes, v2: bytes, n: int) -> int:
    """Compare the first ``n`` bytes of two buffers as unsigned values."""
    a, b = bytes(v1), bytes(v2)
    if n > len(a) or n > len(b):
        raise ValueError("n exceeds the length of a buffer")
    for x, y in zip(a[:n], b[:n]):
        if x != y:
            return x - y
    return 0


def memmove(buf: bytearray, dst: int, src: int, n: int) -> bytearray:
    """Copy ``n`` bytes of ``buf`` from offset ``src`` to ``dst``; regions may overlap."""
    if n < 0 or dst < 0 or src < 0:
        raise ValueError("offsets and length must not be negative")
    if dst + n > len(buf) or src + n > len(buf):
        raise ValueError("copy extends past the end of the buffer")
    buf[dst:dst + n] = bytes(buf[src:src + n])
    return buf