[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "enmime"
version = "0.1.0"
description = "Building blocks for MIME e-mail: part-tree search, header decoding, charset conversion, content cleaners and text protocol I/O"
requires-python = ">=3.10"
dependencies = []
keywords = ["email", "mime", "rfc2047", "quoted-printable", "base64", "textproto", "headers", "charset"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Email",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["enmime"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
