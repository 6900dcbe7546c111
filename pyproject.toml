[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vaultswap"
version = "0.1.0"
description = "Copy, compare, merge and audit secrets in Vault KV v2 engines, with a health-check command"
requires-python = ">=3.10"
keywords = ["vault", "secrets", "kv", "diff", "namespaces", "audit", "health"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Security",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vaultswap = "vaultswap.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vaultswap"]

[tool.pytest.ini_options]
addopts = "-ra"
