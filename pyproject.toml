[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fogtools"
version = "0.1.0"
description = "Small Unix-style tools, a shell command parser, a file-system image builder and a simulated Sv39 page table"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "unix",
    "shell",
    "grep",
    "wc",
    "filesystem",
    "mkfs",
    "page-table",
    "virtio",
    "allocator",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
    "Topic :: System :: Filesystems",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fog-grep = "fogtools.grep:main"
fog-wc = "fogtools.wc:main"
fog-ls = "fogtools.ls:main"
fog-cat = "fogtools.fileutils:cat_main"
fog-echo = "fogtools.fileutils:echo_main"
fog-copy = "fogtools.fileutils:copy_main"
fog-move = "fogtools.fileutils:move_main"
fog-ln = "fogtools.fileutils:ln_main"
fog-mkdir = "fogtools.fileutils:mkdir_main"
fog-rm = "fogtools.fileutils:rm_main"
fog-kill = "fogtools.fileutils:kill_main"
fog-mkfs = "fogtools.mkfs:main"

[tool.hatch.build.targets.wheel]
packages = ["fogtools"]

[tool.hatch.build.targets.sdist]
include = ["fogtools", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
