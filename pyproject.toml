[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labbench"
version = "0.1.0"
description = "Building blocks for heap-allocator experiments, robust I/O and TCP socket helpers, and a CGI adder"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "malloc",
    "allocator",
    "heap",
    "trace",
    "benchmark",
    "timing",
    "cgi",
    "robust-io",
    "sockets",
]
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
    "Topic :: Software Development :: Testing",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labbench-adder = "labbench.adder:main"

[tool.hatch.build.targets.wheel]
packages = ["labbench"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
