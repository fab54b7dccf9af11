[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dendrite"
version = "0.1.0"
description = "Token-stream Cayley tree profiling for distinguishing human-written from machine-generated text"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "text detection",
    "stylometry",
    "walsh-hadamard",
    "cayley tree",
    "tokenizer",
    "nostr",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dendrite"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
