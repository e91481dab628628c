import io
import os
import struct

import pytest

from sfskit import mksfs
from sfskit.mksfs import MksfsError, SfsBuilder, create_image, main

BLK = mksfs.SFS_BLKSIZE


def block(img, n):
    return img[n * BLK:(n + 1) * BLK]


def inode(img, n):
    f = struct.unpack_from("<IHHI12III", img, n * BLK)
    return {
        "size": f[0],
        "type": f[1],
        "nlinks": f[2],
        "blocks": f[3],
        "direct": list(f[4:16]),
        "indirect": f[16],
        "db_indirect": f[17],
    }


def block_numbers(img, node):
    nums = node["direct"][:min(node["blocks"], mksfs.SFS_NDIRECT)]
    if node["blocks"] > mksfs.SFS_NDIRECT:
        words = struct.unpack_from("<1024I", img, node["indirect"] * BLK)
        nums += list(words[:node["blocks"] - mksfs.SFS_NDIRECT])
    return nums


def content(img, node):
    return b"".join(block(img, n) for n in block_numbers(img, node))[:node["size"]]


def entries(img, dir_ino):
    result = []
    for n in block_numbers(img, inode(img, dir_ino)):
        raw = block(img, n)
        ino = struct.unpack_from("<I", raw)[0]
        name = raw[4:mksfs.SFS_DENTRY_SIZE].split(b"\0", 1)[0].decode()
        result.append((name, ino))
    return result


def lookup(img, dir_ino, name):
    return dict(entries(img, dir_ino))[name]


def superblock(img):
    magic, blocks, unused, info = struct.unpack_from("<III32s", img, 0)
    return magic, blocks, unused, info


def build(home, nblocks=256):
    image = io.BytesIO(bytes(nblocks * BLK))
    with SfsBuilder(image) as builder:
        builder.add_tree(home)
    return image.getvalue(), builder


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


def test_too_small_image_rejected():
    with pytest.raises(MksfsError):
        SfsBuilder(io.BytesIO(bytes(3 * BLK)))


def test_superblock(home):
    img, builder = build(home, 64)
    magic, blocks, unused, info = superblock(img)
    assert magic == 0x2F8DBE2A
    assert blocks == 64 == builder.blocks
    assert unused == builder.unused_blocks
    assert info.split(b"\0", 1)[0] == b"simple file system"


def test_empty_root_directory(home):
    img, _ = build(home, 64)
    root = inode(img, mksfs.SFS_BLKN_ROOT)
    assert root["type"] == mksfs.SFS_TYPE_DIR
    assert entries(img, mksfs.SFS_BLKN_ROOT) == [(".", 1), ("..", 1)]
    assert root["nlinks"] == 2
    assert root["size"] == mksfs.SFS_DENTRY_SIZE * root["blocks"]


def test_freemap_matches_unused_count(home):
    (home / "a.txt").write_bytes(b"x" * 5000)
    img, builder = build(home, 64)
    bits = int.from_bytes(block(img, mksfs.SFS_BLKN_FREEMAP), "little")
    assert bin(bits).count("1") == superblock(img)[2] == builder.unused_blocks
    used = {0, 1, 2} | set(block_numbers(img, inode(img, 1)))
    file_ino = lookup(img, 1, "a.txt")
    used |= {file_ino} | set(block_numbers(img, inode(img, file_ino)))
    for n in used:
        assert not (bits >> n) & 1
    assert bits >> 64 == 0


def test_small_file(home):
    (home / "hello.txt").write_bytes(b"hello world")
    img, _ = build(home)
    node = inode(img, lookup(img, 1, "hello.txt"))
    assert node["type"] == mksfs.SFS_TYPE_FILE
    assert node["size"] == len(b"hello world")
    assert node["blocks"] == 1
    assert node["nlinks"] == 1
    data_block = block(img, node["direct"][0])
    assert data_block == b"hello world".ljust(BLK, b"\0")


def test_multi_block_file_roundtrip(home):
    payload = bytes(range(256)) * 50
    (home / "data.bin").write_bytes(payload)
    img, _ = build(home)
    node = inode(img, lookup(img, 1, "data.bin"))
    assert node["indirect"] == 0
    assert content(img, node) == payload


def test_indirect_blocks(home):
    payload = os.urandom(BLK * 14 + 7)
    (home / "big.bin").write_bytes(payload)
    img, _ = build(home)
    node = inode(img, lookup(img, 1, "big.bin"))
    assert node["blocks"] == len(block_numbers(img, node))
    assert node["indirect"] != 0
    assert node["db_indirect"] == 0
    assert content(img, node) == payload
    bits = int.from_bytes(block(img, 2), "little")
    assert not (bits >> node["indirect"]) & 1


def test_hard_links_share_inode(home):
    (home / "one").write_bytes(b"shared")
    os.link(home / "one", home / "two")
    img, _ = build(home)
    ino = lookup(img, 1, "one")
    assert lookup(img, 1, "two") == ino
    node = inode(img, ino)
    assert node["nlinks"] == 2
    assert content(img, node) == b"shared"


def test_symlink(home):
    os.symlink("some/target", home / "link")
    img, _ = build(home)
    node = inode(img, lookup(img, 1, "link"))
    assert node["type"] == mksfs.SFS_TYPE_LINK
    assert content(img, node) == b"some/target"


def test_subdirectory(home):
    sub = home / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_bytes(b"inner")
    img, _ = build(home)
    sub_ino = lookup(img, 1, "sub")
    sub_node = inode(img, sub_ino)
    assert sub_node["type"] == mksfs.SFS_TYPE_DIR
    sub_entries = dict(entries(img, sub_ino))
    assert sub_entries["."] == sub_ino
    assert sub_entries[".."] == mksfs.SFS_BLKN_ROOT
    assert content(img, inode(img, sub_entries["inner.txt"])) == b"inner"
    links_to_root = sum(
        1 for d in (1, sub_ino) for _, ino in entries(img, d) if ino == mksfs.SFS_BLKN_ROOT
    )
    assert inode(img, 1)["nlinks"] == links_to_root
    assert sub_node["nlinks"] == 2


def test_hidden_names_skipped(home):
    (home / ".hidden").write_bytes(b"secret stuff")
    (home / "shown").write_bytes(b"ok")
    img, _ = build(home)
    names = [name for name, _ in entries(img, 1)]
    assert names.count("shown") == 1
    assert ".hidden" not in names


def test_out_of_disk_space(home):
    (home / "big").write_bytes(bytes(BLK * 5))
    image = io.BytesIO(bytes(8 * BLK))
    builder = SfsBuilder(image)
    with pytest.raises(MksfsError, match="out of disk space"):
        builder.add_tree(home)


def test_add_tree_requires_directory(tmp_path):
    target = tmp_path / "file.txt"
    target.write_bytes(b"x")
    builder = SfsBuilder(io.BytesIO(bytes(64 * BLK)))
    with pytest.raises(MksfsError):
        builder.add_tree(target)
    with pytest.raises(MksfsError):
        builder.add_tree(tmp_path / "missing")


def test_add_tree_only_once(home):
    builder = SfsBuilder(io.BytesIO(bytes(64 * BLK)))
    builder.add_tree(home)
    with pytest.raises(MksfsError):
        builder.add_tree(home)


@pytest.mark.parametrize("name", ["disk.bin", ".img", "img"])
def test_create_image_rejects_bad_names(tmp_path, home, name):
    with pytest.raises(MksfsError, match="invalid .img file name"):
        create_image(str(tmp_path / name) if name != ".img" else name, home)


def test_create_image_writes_file(tmp_path, home):
    (home / "f").write_bytes(b"content")
    img_path = tmp_path / "disk.img"
    img_path.write_bytes(bytes(64 * BLK))
    create_image(str(img_path), home)
    img = img_path.read_bytes()
    assert len(img) == 64 * BLK
    assert superblock(img)[0] == mksfs.SFS_MAGIC
    assert content(img, inode(img, lookup(img, 1, "f"))) == b"content"


def test_main_success(tmp_path, home, capsys):
    img_path = tmp_path / "disk.img"
    img_path.write_bytes(bytes(64 * BLK))
    assert main([str(img_path), str(home)]) == 0
    assert capsys.readouterr().out == f"create {img_path} ({home}) successfully.\n"
    assert superblock(img_path.read_bytes())[0] == mksfs.SFS_MAGIC


def test_main_usage(capsys):
    assert main(["only-one.img"]) == -1
    assert "usage" in capsys.readouterr().err


def test_main_missing_image(tmp_path, home, capsys):
    assert main([str(tmp_path / "absent.img"), str(home)]) == -1
    assert "failed" in capsys.readouterr().err