"""Decoding of 32-bit little-endian ELF file and program headers."""

import struct
from dataclasses import dataclass

__all__ = [
    "ELF_MAGIC",
    "ELF_PT_LOAD",
    "ELF_PF_X",
    "ELF_PF_W",
    "ELF_PF_R",
    "ElfHeader",
    "ProgramHeader",
]

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word

ELF_PT_LOAD = 1

ELF_PF_X = 1
ELF_PF_W = 2
ELF_PF_R = 4

_ELFHDR = struct.Struct("<I12sHHIIIIIHHHHHH")
_PROGHDR = struct.Struct("<8I")


def _unpack(layout: struct.Struct, data, what: str) -> tuple:
    raw = bytes(data)
    if len(raw) < layout.size:
        raise ValueError(f"{what} needs {layout.size} bytes, got {len(raw)}")
    return layout.unpack_from(raw)


@dataclass(frozen=True)
class ElfHeader:
    """The ELF file header."""

    magic: int
    elf: bytes
    type: int
    machine: int
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int

    SIZE = _ELFHDR.size

    @classmethod
    def parse(cls, data) -> "ElfHeader":
        """Decode a header from the start of ``data``; extra bytes are ignored."""
        return cls(*_unpack(_ELFHDR, data, "ELF header"))


@dataclass(frozen=True)
class ProgramHeader:
    """One entry of the program header table."""

    type: int
    offset: int
    va: int
    pa: int
    filesz: int
    memsz: int
    flags: int
    align: int

    SIZE = _PROGHDR.size

    @classmethod
    def parse(cls, data) -> "ProgramHeader":
        """Decode an entry from the start of ``data``; extra bytes are ignored."""
        return cls(*_unpack(_PROGHDR, data, "program header"))