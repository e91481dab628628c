# sfskit

Host-side tools and small libraries for a simple teaching kernel.

## Commands

Build a Simple File System (SFS) image from a directory tree. The image
file must already exist with its final size, for example 128 MiB of zeros.
Its name must end in `.img`. Names that start with a dot are skipped.
Regular files, directories and symbolic links are copied. Other kinds of
file are skipped with a warning:

    sfskit-mksfs sfs.img disk0

Turn a raw boot block of at most 510 bytes into a signed 512-byte boot
sector that ends in `0x55 0xAA`:

    sfskit-sign bootblock.out bootblock

Print the assembler source for the 256 trap entry points and the vector
table:

    sfskit-vector > vectors.S

Each command returns 0 on success and -1 on failure, and prints the reason
to standard error.

## Library

- `sfskit.mksfs`: `create_image(imgname, home)` does the whole job.
  `SfsBuilder(image)` works on an open, seekable binary stream and has
  `add_tree(home)` and `close()`; it can also be used as a context
  manager. Failures raise `MksfsError`. The layout constants (`SFS_MAGIC`,
  `SFS_BLKSIZE` and so on) are exported too.
- `sfskit.sign`: `make_boot_sector(data)` returns the 512 signed bytes and
  raises `ValueError` for more than 510 bytes of input.
  `sign_file(src, dst)` writes the sector and returns the input size.
- `sfskit.vector`: `generate_vectors()` returns the assembler text.
- `sfskit.printfmt`: kernel-style formatting with `sprintf(fmt, *args)`,
  `vformat(fmt, args)` and `snprintf(size, fmt, *args)`. The last one
  returns the text that fits and the full length. The `%e` conversion
  prints the text for an error code.
- `sfskit.errors`: the `ErrorCode` enumeration, with a `message` property,
  and `error_string(code)`. A negative code is treated like a positive
  one, and a code with no text gives `"error N"`.
- `sfskit.hashing`: `hash32(val, bits)` and the 48-bit linear congruential
  generator, as `RandomGenerator` or through the shared `rand()` and
  `srand(seed)`.
- `sfskit.cstring`: C string semantics for `str` or bytes. It has
  `strnlen`, `strcmp`, `strncmp`, `strchr`, `strfind`, `strtol`, `memcmp`
  and `memmove`. `strtol` returns the value and the index where parsing
  stopped.
- `sfskit.linkedlist.ListEntry`: a circular doubly linked list in which
  the head is itself an entry.
- `sfskit.skewheap`: `SkewHeapNode` with `merge`, `insert` and `remove`,
  plus the `SkewHeap` priority queue (`push`, `pop`, `peek`, `len`).
- `sfskit.filemode`: `is_reg`, `is_dir`, `is_lnk`, `is_chr` and `is_blk`
  for the kernel's mode bits.
- `sfskit.elf`: `ElfHeader.parse(data)` and `ProgramHeader.parse(data)`
  for 32-bit little-endian ELF headers.

Example:

    from sfskit.printfmt import sprintf
    from sfskit.errors import ErrorCode

    sprintf("%08x %e", 0xBEEF, -ErrorCode.NO_MEM)
    # '0000beef out of memory'

## What it does not do

The package does not contain the kernel itself, and it does not build or
run one. `sfskit-mksfs` does not create or size the image file: it only
fills a file that already exists. Nothing here reads an SFS image back.

## Tests

    pip install -e .[test]
    pytest