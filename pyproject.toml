[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ueempire"
version = "0.1.0"
description = "In-memory proof-of-stake node with validator management and BFT-style block finalization"
requires-python = ">=3.10"
dependencies = []
keywords = ["blockchain", "proof-of-stake", "consensus", "validator", "bft"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ued = "ueempire.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ueempire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
