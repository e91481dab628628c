"""Turn a small boot loader binary into a signed 512-byte boot sector."""

import os
import sys
from typing import Optional, Sequence

__all__ = ["SECTOR_SIZE", "MAX_CODE_SIZE", "BOOT_SIGNATURE", "make_boot_sector", "sign_file", "main"]

SECTOR_SIZE = 512
MAX_CODE_SIZE = 510
BOOT_SIGNATURE = b"\x55\xaa"


def make_boot_sector(data: bytes) -> bytes:
    """Pad ``data`` to 510 bytes and append the 0x55 0xAA signature."""
    raw = bytes(data)
    if len(raw) > MAX_CODE_SIZE:
        raise ValueError(f"{len(raw)} >> {MAX_CODE_SIZE}!!")
    return raw.ljust(MAX_CODE_SIZE, b"\0") + BOOT_SIGNATURE


def sign_file(src, dst) -> int:
    """Write the boot sector built from file ``src`` to ``dst``; return the input size."""
    with open(src, "rb") as handle:
        data = handle.read()
    sector = make_boot_sector(data)
    with open(dst, "wb") as handle:
        written = handle.write(sector)
    if written != SECTOR_SIZE:
        raise OSError(f"write '{os.fsdecode(dst)}' error, size is {written}.")
    return len(data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``<input filename> <output filename>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: <input filename> <output filename>", file=sys.stderr)
        return -1
    src, dst = args
    try:
        size = os.stat(src).st_size
    except OSError as exc:
        print(f"Error opening file '{src}': {exc.strerror}", file=sys.stderr)
        return -1
    print(f"'{src}' size: {size} bytes")
    try:
        sign_file(src, dst)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return -1
    except OSError as exc:
        print(exc, file=sys.stderr)
        return -1
    print(f"build 512 bytes boot sector: '{dst}' success!")
    return 0