# fogtools

Small, dependency-free Unix-style tools together with a few operating-system
data structures modelled in plain Python: a shell command parser, a
first-fit memory allocator, a simulated Sv39 page table, virtio ring
structures and a file-system image builder.

## Commands

| Command     | What it does                                                          |
|-------------|-----------------------------------------------------------------------|
| `fog-grep`  | print lines matching a pattern that knows only `^ . * $`              |
| `fog-wc`    | print line, word and byte counts                                      |
| `fog-ls`    | list files with their type, inode number and size                     |
| `fog-cat`   | concatenate files, or standard input, to standard output              |
| `fog-echo`  | print its arguments separated by spaces                               |
| `fog-copy`  | write a file's bytes over the start of an existing destination file   |
| `fog-move`  | move a file into a directory by hard-linking it there and unlinking it |
| `fog-ln`    | make a hard link                                                      |
| `fog-mkdir` | create directories, stopping at the first failure                     |
| `fog-rm`    | remove files and empty directories, stopping at the first failure     |
| `fog-kill`  | send a kill signal to each positive process id given                  |
| `fog-mkfs`  | build a file-system image holding the given files                     |

```
fog-grep '^def ' module.py
fog-wc notes.txt
fog-ls .
fog-echo hello world
fog-mkfs fs.img README.md
```

`fog-grep` and `fog-wc` read standard input when no file is given.
`fog-mkfs` strips a leading `user/` and a leading `_` from each file name
before placing it in the image's root directory, and reports the layout and
bitmap it wrote on standard output.

## Library modules

- `fogtools.printf` – `format_string`, `fprintf` and `printf`, understanding
  `%d %l %x %p %s %c %%`; any other conversion is echoed back as is.
- `fogtools.ulib` – `atoi`, `fgets` and `getline`.
- `fogtools.umalloc` – `Allocator` with `malloc`, `free` and `free_blocks`,
  a first-fit free-list allocator over a simulated heap; it raises
  `OutOfMemory` when an optional size limit stops the heap from growing.
- `fogtools.prng` – the Park–Miller generator `do_rand` and the `Rand` class.
- `fogtools.grep` – `match(re, text)` and `grep(pattern, stream, out)`.
- `fogtools.wc` – `wc(stream)` returning a `Counts` of lines, words and chars.
- `fogtools.sh` – `gettoken` and `parsecmd`, which turns a command line into
  a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd` and
  raises `ShellSyntaxError` on bad input. Redirections carry `OpenFlag`
  modes.
- `fogtools.ls` – `FileType`, `Stat`, `stat_path`, `fmtname` and `ls`.
- `fogtools.memlayout` – addresses of the qemu `virt` machine and helpers
  such as `clint_mtimecmp`, `plic_sclaim` and `kstack`.
- `fogtools.virtio` – register offsets and flags, and the ring structures
  `VirtqDesc`, `VirtqAvail`, `VirtqUsedElem`, `VirtqUsed` and
  `VirtioBlkReq`, each with `pack` and `unpack`.
- `fogtools.vm` – `PhysicalMemory` with a page allocator and a three-level
  `PageTable` with `walk`, `mappages`, `unmap`, `grow`, `shrink`,
  `copy_to`, `copyin`, `copyout` and `copyinstr`. Broken invariants raise
  `VmPanic`, unmapped user addresses `BadAddress`, exhausted memory
  `OutOfPages`.
- `fogtools.mkfs` – `FsLayout`, `Superblock`, `Dinode`, `Dirent`,
  `ImageBuilder` and `make_image` for writing disk images with a
  superblock, inode blocks, a free bitmap and data blocks.

```python
from fogtools.grep import match
from fogtools.printf import format_string
from fogtools.sh import parsecmd, PipeCmd

match("^ab*c$", "abbbc")                          # True
format_string("%d %x", -5, 255)                   # "-5 FF"
isinstance(parsecmd("cat < in | wc"), PipeCmd)    # True
```

## What this package does not do

- There is no interactive shell: `fogtools.sh` parses command lines into a
  tree but does not run them.
- The page tables, allocator and virtio structures are models in memory;
  nothing here boots, drives a device or runs as a kernel.
- `fog-mkfs` writes images; there is no tool to read files back out of one.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```