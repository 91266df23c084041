[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iodyn"
version = "0.1.0"
description = "Sequence structures with archived subsequences: archive stacks, level trees, tree cursors, a gauged random access zipper and a hash skip-list"
requires-python = ">=3.10"
dependencies = []
keywords = ["zipper", "sequence", "persistent", "level-tree", "cursor", "skiplist"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["iodyn"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
