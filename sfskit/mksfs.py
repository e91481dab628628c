"""Build a simple-file-system (SFS) disk image from a host directory tree.

The image file must already exist with its final size. Its size fixes the
number of blocks. Block 0 holds the superblock and block 1 the root inode.
The free-block bitmap starts at block 2. Every inode, directory entry and
data block after that takes one whole block.
"""

import logging
import os
import stat
import struct
import sys
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Sequence

__all__ = [
    "MksfsError",
    "SfsBuilder",
    "create_image",
    "main",
    "SFS_MAGIC",
    "SFS_NDIRECT",
    "SFS_BLKSIZE",
    "SFS_MAX_NBLKS",
    "SFS_MAX_INFO_LEN",
    "SFS_MAX_FNAME_LEN",
    "SFS_MAX_FILE_SIZE",
    "SFS_BLKBITS",
    "SFS_TYPE_FILE",
    "SFS_TYPE_DIR",
    "SFS_TYPE_LINK",
    "SFS_BLKN_SUPER",
    "SFS_BLKN_ROOT",
    "SFS_BLKN_FREEMAP",
    "SFS_BLK_NENTRY",
    "SFS_DENTRY_SIZE",
]

SFS_MAGIC = 0x2F8DBE2A
SFS_NDIRECT = 12
SFS_BLKSIZE = 4096
SFS_MAX_NBLKS = 1024 * 512
SFS_MAX_INFO_LEN = 31
SFS_MAX_FNAME_LEN = 255
SFS_MAX_FILE_SIZE = 1024 * 1024 * 128

SFS_BLKBITS = SFS_BLKSIZE * 8
SFS_TYPE_FILE = 1
SFS_TYPE_DIR = 2
SFS_TYPE_LINK = 3

SFS_BLKN_SUPER = 0
SFS_BLKN_ROOT = 1
SFS_BLKN_FREEMAP = 2

SFS_BLK_NENTRY = SFS_BLKSIZE // 4
SFS_L0_NBLKS = SFS_NDIRECT
SFS_L1_NBLKS = SFS_BLK_NENTRY + SFS_L0_NBLKS
SFS_L2_NBLKS = SFS_BLK_NENTRY * SFS_BLK_NENTRY + SFS_L1_NBLKS
SFS_LN_NBLKS = SFS_MAX_FILE_SIZE // SFS_BLKSIZE

# Each directory entry is written as the first 256 bytes of (ino, name[256]).
SFS_DENTRY_SIZE = SFS_MAX_FNAME_LEN + 1

_INFO = b"simple file system"

_INODE = struct.Struct(f"<IHHI{SFS_NDIRECT}III")
_SUPER = struct.Struct(f"<III{SFS_MAX_INFO_LEN + 1}s")
_ENTRY_INO = struct.Struct("<I")
_BLOCK_WORDS = struct.Struct(f"<{SFS_BLK_NENTRY}I")

_log = logging.getLogger(__name__)


class MksfsError(Exception):
    """Raised when an image cannot be built."""


@dataclass
class _Inode:
    type: int
    size: int = 0
    nlinks: int = 0
    blocks: int = 0
    direct: List[int] = field(default_factory=lambda: [0] * SFS_NDIRECT)
    indirect: int = 0
    db_indirect: int = 0

    def pack(self) -> bytes:
        return _INODE.pack(
            self.size & 0xFFFFFFFF,
            self.type,
            self.nlinks & 0xFFFF,
            self.blocks & 0xFFFFFFFF,
            *self.direct,
            self.indirect,
            self.db_indirect,
        )


@dataclass
class _CacheBlock:
    ino: int
    entries: List[int] = field(default_factory=lambda: [0] * SFS_BLK_NENTRY)


@dataclass
class _CacheInode:
    ino: int
    real: int
    inode: _Inode
    nblks: int = 0
    l1: Optional[_CacheBlock] = None
    l2: Optional[_CacheBlock] = None


_ODD_MODES = (
    (stat.S_ISFIFO, "f"),
    (stat.S_ISSOCK, "s"),
    (stat.S_ISCHR, "c"),
    (stat.S_ISBLK, "b"),
)


class SfsBuilder:
    """Lays out an SFS image in a writable, seekable binary stream.

    Data blocks are written as soon as they are read. The superblock, the
    free map, the inodes and the indirect blocks are written by ``close``.
    """

    def __init__(self, image: BinaryIO) -> None:
        self._image = image
        size = image.seek(0, os.SEEK_END)
        ninos = size // SFS_BLKSIZE
        if ninos > SFS_MAX_NBLKS:
            ninos = SFS_MAX_NBLKS
            _log.warning("img file is too big (%d bytes, only use %d blocks).", size, ninos)
        next_ino = SFS_BLKN_FREEMAP + (ninos + SFS_BLKBITS - 1) // SFS_BLKBITS
        if next_ino >= ninos:
            raise MksfsError(
                f"img file is too small ({size} bytes, {ninos} blocks, "
                f"bitmap use at least {next_ino - 2} blocks)."
            )
        self.blocks = ninos
        self.unused_blocks = ninos - next_ino
        self._next_ino = next_ino
        self._subpath: List[str] = []
        self._inodes: List[_CacheInode] = []
        self._by_real: dict = {}
        self._cache_blocks: dict = {}
        self._filled = False
        self._closed = False
        self._root = self._alloc_cache_inode(0, SFS_BLKN_ROOT, SFS_TYPE_DIR)

    def __enter__(self) -> "SfsBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()

    # -- allocation ---------------------------------------------------

    def _alloc_ino(self) -> int:
        if self._next_ino < self.blocks:
            self.unused_blocks -= 1
            ino = self._next_ino
            self._next_ino += 1
            return ino
        raise MksfsError("out of disk space.")

    def _alloc_cache_block(self) -> _CacheBlock:
        cb = _CacheBlock(self._alloc_ino())
        self._cache_blocks[cb.ino] = cb
        return cb

    def _alloc_cache_inode(self, real: int, ino: int, type_: int) -> _CacheInode:
        if ino == 0:
            ino = self._alloc_ino()
        ci = _CacheInode(ino=ino, real=real, inode=_Inode(type=type_))
        self._inodes.append(ci)
        self._by_real[real] = ci
        return ci

    # -- output -------------------------------------------------------

    def _write_block(self, data: bytes, ino: int) -> None:
        if len(data) > SFS_BLKSIZE or ino >= self.blocks:
            raise MksfsError(f"block {ino} cannot hold {len(data)} bytes.")
        self._image.seek(ino * SFS_BLKSIZE)
        written = self._image.write(bytes(data).ljust(SFS_BLKSIZE, b"\0"))
        if written != SFS_BLKSIZE:
            raise MksfsError(f"write {ino} block failed: ({written}/{SFS_BLKSIZE}).")

    def _path_error(self, name: Optional[str], message: str) -> MksfsError:
        where = "current is: /" + "".join(f"{part}/" for part in self._subpath)
        if name is not None:
            where += name
        return MksfsError(f"{where}\n{message}")

    # -- building -----------------------------------------------------

    def _update_cache(self, cb: Optional[_CacheBlock], ino: int):
        if ino == 0:
            cb = self._alloc_cache_block()
            ino = cb.ino
        elif cb is None or cb.ino != ino:
            cb = self._cache_blocks[ino]
        return cb, ino

    def _append_block(self, file: _CacheInode, size: int, ino: int, name: str) -> None:
        nblks = file.nblks
        inode = file.inode
        if nblks >= SFS_LN_NBLKS:
            raise self._path_error(name, "file is too big.")
        if nblks < SFS_L0_NBLKS:
            inode.direct[nblks] = ino
        elif nblks < SFS_L1_NBLKS:
            file.l1, inode.indirect = self._update_cache(file.l1, inode.indirect)
            file.l1.entries[nblks - SFS_L0_NBLKS] = ino
        else:
            index = nblks - SFS_L1_NBLKS
            file.l2, inode.db_indirect = self._update_cache(file.l2, inode.db_indirect)
            slot = index // SFS_BLK_NENTRY
            file.l1, file.l2.entries[slot] = self._update_cache(file.l1, file.l2.entries[slot])
            file.l1.entries[index % SFS_BLK_NENTRY] = ino
        file.nblks += 1
        inode.size += size
        inode.blocks += 1

    def _add_entry(self, current: _CacheInode, file: _CacheInode, name: str) -> None:
        raw = os.fsencode(name)
        if current.inode.type != SFS_TYPE_DIR:
            raise MksfsError(f"cannot add '{name}' to a non-directory.")
        if len(raw) > SFS_MAX_FNAME_LEN:
            raise MksfsError(f"file name is too long: {name}")
        record = (_ENTRY_INO.pack(file.ino) + raw.ljust(SFS_DENTRY_SIZE, b"\0"))[:SFS_DENTRY_SIZE]
        entry_ino = self._alloc_ino()
        self._write_block(record, entry_ino)
        self._append_block(current, SFS_DENTRY_SIZE, entry_ino, name)
        file.inode.nlinks += 1

    def _add_dir(self, parent: _CacheInode, dirname: str, path: str, real: int) -> None:
        if real in self._by_real:
            raise self._path_error(dirname, "directory is reachable twice.")
        current = self._alloc_cache_inode(real, 0, SFS_TYPE_DIR)
        self._subpath.append(dirname)
        try:
            self._open_dir(current, parent, path)
        finally:
            self._subpath.pop()
        self._add_entry(parent, current, dirname)

    def _add_file(self, current: _CacheInode, name: str, path: str, real: int) -> None:
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise self._path_error(None, f"open failed: {name}") from exc
        with handle:
            file = self._by_real.get(real)
            if file is None:
                file = self._alloc_cache_inode(real, 0, SFS_TYPE_FILE)
                self._read_file(file, name, handle)
        self._add_entry(current, file, name)

    def _read_file(self, file: _CacheInode, name: str, handle: BinaryIO) -> None:
        try:
            while chunk := handle.read(SFS_BLKSIZE):
                ino = self._alloc_ino()
                self._write_block(chunk, ino)
                self._append_block(file, len(chunk), ino, name)
        except OSError as exc:
            raise self._path_error(name, "read file failed.") from exc

    def _add_link(self, current: _CacheInode, name: str, path: str, real: int) -> None:
        file = self._alloc_cache_inode(real, 0, SFS_TYPE_LINK)
        ino = self._alloc_ino()
        try:
            target = os.fsencode(os.readlink(path))
        except OSError as exc:
            raise self._path_error(name, "read link failed, -1") from exc
        if len(target) >= SFS_BLKSIZE:
            raise self._path_error(name, f"read link failed, {SFS_BLKSIZE}")
        self._write_block(target, ino)
        self._append_block(file, len(target), ino, name)
        self._add_entry(current, file, name)

    def _open_dir(self, current: _CacheInode, parent: _CacheInode, path: str) -> None:
        try:
            listing = os.scandir(path)
        except OSError as exc:
            raise self._path_error(None, "opendir failed.") from exc
        self._add_entry(current, current, ".")
        self._add_entry(current, parent, "..")
        with listing:
            for entry in listing:
                name = entry.name
                if name.startswith("."):
                    continue
                if len(os.fsencode(name)) > SFS_MAX_FNAME_LEN:
                    raise self._path_error(None, f"file name is too long: {name}")
                full = os.path.join(path, name)
                try:
                    info = os.lstat(full)
                except OSError as exc:
                    raise MksfsError(f"lstat '{name}' failed.") from exc
                mode = info.st_mode
                if stat.S_ISLNK(mode):
                    self._add_link(current, name, full, info.st_ino)
                elif stat.S_ISDIR(mode):
                    self._add_dir(current, name, full, info.st_ino)
                elif stat.S_ISREG(mode):
                    self._add_file(current, name, full, info.st_ino)
                else:
                    kind = "?"
                    for test, letter in _ODD_MODES:
                        if test(mode):
                            kind = letter
                    _log.warning(
                        "%s\nunsupported mode %07x (%s): file %s",
                        self._path_error(None, "").args[0].rstrip("\n"),
                        mode,
                        kind,
                        name,
                    )

    # -- public -------------------------------------------------------

    def add_tree(self, home) -> None:
        """Fill the root directory with the contents of directory ``home``.

        Names starting with a dot are skipped. This may be done only once.
        """
        if self._closed:
            raise MksfsError("image is already closed.")
        if self._filled:
            raise MksfsError("root directory is already filled.")
        home = os.fspath(home)
        try:
            info = os.lstat(home)
        except OSError as exc:
            raise MksfsError(f"open home directory '{home}' failed.") from exc
        if stat.S_ISLNK(info.st_mode):
            raise MksfsError(f"open home directory '{home}' failed.")
        if not stat.S_ISDIR(info.st_mode):
            raise MksfsError(f"home '{home}' is not a directory.")
        self._filled = True
        self._open_dir(self._root, self._root, home)

    def close(self) -> None:
        """Write the free map, the superblock, inodes and indirect blocks."""
        if self._closed:
            return
        next_ino = self._next_ino
        ino = SFS_BLKN_FREEMAP
        for base in range(0, self.blocks, SFS_BLKBITS):
            bitmap = 0
            if base + SFS_BLKBITS > next_ino:
                start = max(0, next_ino - base)
                end = min(SFS_BLKBITS, self.blocks - base)
                if end > start:
                    bitmap = ((1 << end) - 1) ^ ((1 << start) - 1)
            self._write_block(bitmap.to_bytes(SFS_BLKSIZE, "little"), ino)
            ino += 1
        self._write_block(
            _SUPER.pack(SFS_MAGIC, self.blocks, self.unused_blocks, _INFO), SFS_BLKN_SUPER
        )
        for cb in self._cache_blocks.values():
            self._write_block(_BLOCK_WORDS.pack(*cb.entries), cb.ino)
        for ci in self._inodes:
            self._write_block(ci.inode.pack(), ci.ino)
        self._closed = True


def create_image(imgname, home) -> None:
    """Write an SFS image of directory ``home`` into the existing file ``imgname``."""
    name = os.fsdecode(imgname)
    expect = ".img"
    if len(name) <= len(expect) or not name.endswith(expect):
        raise MksfsError(f"invalid .img file name '{name}'.")
    try:
        fd = os.open(name, os.O_WRONLY)
    except OSError as exc:
        raise MksfsError(f"open '{name}' failed.") from exc
    with open(fd, "wb") as image:
        builder = SfsBuilder(image)
        builder.add_tree(home)
        builder.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``<image.img> <directory>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("usage: <input *.img> <input dirname>", file=sys.stderr)
        return -1
    imgname, home = args
    try:
        create_image(imgname, home)
    except MksfsError as exc:
        print(f"mksfs: {exc}", file=sys.stderr)
        return -1
    print(f"create {imgname} ({home}) successfully.")
    return 0