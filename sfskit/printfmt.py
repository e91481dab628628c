"""A small printf-style formatter with the kernel's formatting rules."""

import operator
from collections.abc import Iterator, Sequence
from typing import Any

from .errors import error_string

__all__ = ["vformat", "sprintf", "snprintf"]


def _take(values: Iterator[Any]) -> Any:
    try:
        return next(values)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def _signed(value: Any, lflag: int) -> int:
    bits = 64 if lflag >= 2 else 32
    num = operator.index(value) & ((1 << bits) - 1)
    if num >= 1 << (bits - 1):
        num -= 1 << bits
    return num


def _unsigned(value: Any, lflag: int) -> int:
    bits = 64 if lflag >= 2 else 32
    return operator.index(value) & ((1 << bits) - 1)


def _number(num: int, base: int, width: int, padc: str) -> str:
    digits = {8: format(num, "o"), 10: str(num), 16: format(num, "x")}[base]
    return padc * max(0, width - len(digits)) + digits


def _text(value: Any) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    elif not isinstance(value, str):
        raise TypeError(f"%s expects a string, got {type(value).__name__}")
    return value.split("\0", 1)[0]


def _char(value: Any) -> str:
    if isinstance(value, str) and len(value) == 1:
        return value
    return chr(operator.index(value) & 0xFF)


def _render(fmt: str, args: Sequence[Any]) -> str:
    fmt = fmt.split("\0", 1)[0]
    values = iter(args)
    out: list[str] = []
    end = len(fmt)
    pos = 0
    while pos < end:
        ch = fmt[pos]
        pos += 1
        if ch != "%":
            out.append(ch)
            continue

        spec_start = pos
        padc = " "
        width = precision = -1
        lflag = 0
        altflag = False
        while True:
            ch = fmt[pos] if pos < end else ""
            if ch:
                pos += 1
            if ch == "-":
                padc = "-"
            elif ch == "0":
                padc = "0"
            elif "1" <= ch <= "9" or ch == "*":
                if ch == "*":
                    precision = _signed(_take(values), 0)
                else:
                    stop = pos
                    while stop < end and "0" <= fmt[stop] <= "9":
                        stop += 1
                    precision = int(fmt[pos - 1:stop])
                    pos = stop
                if width < 0:
                    width, precision = precision, -1
            elif ch == ".":
                if width < 0:
                    width = 0
            elif ch == "#":
                altflag = True
            elif ch == "l":
                lflag += 1
            else:
                break

        if ch == "c":
            out.append(_char(_take(values)))
        elif ch == "e":
            out.append(error_string(_signed(_take(values), 0)))
        elif ch == "s":
            shown = _text(_take(values))
            if precision >= 0:
                shown = shown[:precision]
            if altflag:
                shown = "".join(c if " " <= c <= "~" else "?" for c in shown)
            if width > 0 and padc != "-":
                out.append(padc * max(0, width - len(shown)))
                out.append(shown)
            else:
                out.append(shown)
                out.append(" " * max(0, width - len(shown)))
        elif ch == "d":
            num = _signed(_take(values), lflag)
            if num < 0:
                out.append("-")
                num = -num
            out.append(_number(num, 10, width, padc))
        elif ch == "u":
            out.append(_number(_unsigned(_take(values), lflag), 10, width, padc))
        elif ch == "o":
            out.append(_number(_unsigned(_take(values), lflag), 8, width, padc))
        elif ch == "p":
            out.append("0x")
            num = operator.index(_take(values)) & 0xFFFFFFFF
            out.append(_number(num, 16, width, padc))
        elif ch == "x":
            out.append(_number(_unsigned(_take(values), lflag), 16, width, padc))
        elif ch == "%":
            out.append("%")
        else:
            # Unknown conversion: emit it literally, starting after the '%'.
            out.append("%")
            pos = spec_start
    return "".join(out)


def vformat(fmt: str, args: Sequence[Any]) -> str:
    """Format ``args`` according to ``fmt`` and return the resulting text."""
    return _render(fmt, args)


def sprintf(fmt: str, *args: Any) -> str:
    """Format the arguments according to ``fmt``."""
    return _render(fmt, args)


def snprintf(size: int, fmt: str, *args: Any) -> tuple[str, int]:
    """Format into a buffer of ``size`` bytes including the terminator.

    Returns the text that fits and the length the full output would have.
    """
    if size < 1:
        raise ValueError("buffer size must be at least 1")
    text = _render(fmt, args)
    return text[:size - 1], len(text)