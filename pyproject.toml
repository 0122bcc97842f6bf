[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pricefeed"
version = "0.1.0"
description = "Fetch cryptocurrency prices from several exchanges, cache recent rounds in memory and keep their history in SQLite."
requires-python = ">=3.10"
keywords = ["cryptocurrency", "price", "exchange", "aggregation", "cache", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "pyjwt>=2.0",
    "requests>=2.25",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
    "freezegun>=1.2",
]

[tool.hatch.build.targets.wheel]
packages = ["pricefeed"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
