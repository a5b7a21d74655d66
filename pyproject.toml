[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ebscsi"
version = "1.4.0"
description = "Building blocks of a CSI driver for block storage volumes: messages, cloud interface, volume helpers and node mount helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["csi", "kubernetes", "storage", "volumes", "snapshots", "block-storage"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ebscsi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
