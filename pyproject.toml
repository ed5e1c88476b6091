[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "byexample"
version = "0.1.0"
description = "A concurrent HTTP load tester and an SQLite-backed store for short links"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["http", "load-testing", "benchmark", "short-links", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Testing :: Traffic Generation",
    "Topic :: Database",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
byexample-hello = "byexample.book:main"
hit = "byexample.hit.cli:main"
byexample-monitor = "byexample.monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["byexample"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
