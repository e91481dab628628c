[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sfskit"
version = "0.1.0"
description = "Host tools for a small teaching kernel: SFS image builder, boot sector signer, trap vector generator and supporting libraries"
requires-python = ">=3.10"
dependencies = []
keywords = ["sfs", "filesystem", "disk-image", "boot-sector", "kernel", "elf", "printf"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sfskit-mksfs = "sfskit.mksfs:main"
sfskit-sign = "sfskit.sign:main"
sfskit-vector = "sfskit.vector:main"

[tool.hatch.build.targets.wheel]
packages = ["sfskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
