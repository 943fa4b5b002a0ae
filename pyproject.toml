[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wlp4c"
version = "0.1.0"
description = "A compiler for the WLP4 teaching language that emits MIPS assembly"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "wlp4", "mips", "assembly", "slr1", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Environment :: Console",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wlp4c = "wlp4c.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["wlp4c"]

[tool.pytest.ini_options]
addopts = "-ra"
