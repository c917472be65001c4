[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "propmodel"
version = "0.1.0"
description = "Property models: multi-way dataflow constraints solved incrementally with DeltaBlue"
requires-python = ">=3.10"
dependencies = []
keywords = ["property model", "constraints", "deltablue", "dataflow", "multi-way constraints"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
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
packages = ["propmodel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
