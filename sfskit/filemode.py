"""File-type bits of the ``st_mode`` field and predicates over them."""

__all__ = [
    "S_IFMT",
    "S_IFREG",
    "S_IFDIR",
    "S_IFLNK",
    "S_IFCHR",
    "S_IFBLK",
    "is_reg",
    "is_dir",
    "is_lnk",
    "is_chr",
    "is_blk",
]

S_IFMT = 0o70000
S_IFREG = 0o10000
S_IFDIR = 0o20000
S_IFLNK = 0o30000
S_IFCHR = 0o40000
S_IFBLK = 0o50000


def _kind(mode: int) -> int:
    return int(mode) & S_IFMT


def is_reg(mode: int) -> bool:
    """True if ``mode`` describes a regular file."""
    return _kind(mode) == S_IFREG


def is_dir(mode: int) -> bool:
    """True if ``mode`` describes a directory."""
    return _kind(mode) == S_IFDIR


def is_lnk(mode: int) -> bool:
    """True if ``mode`` describes a symbolic link."""
    return _kind(mode) == S_IFLNK


def is_chr(mode: int) -> bool:
    """True if ``mode`` describes a character device."""
    return _kind(mode) == S_IFCHR


def is_blk(mode: int) -> bool:
    """True if ``mode`` describes a block device."""
    return _kind(mode) == S_IFBLK