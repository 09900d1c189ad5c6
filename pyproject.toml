[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "usrtools"
version = "0.1.0"
description = "Small command-line tools: hex dump, Base64, hashing, find, ELF dump, DNS lookup, HTTP client and server, and a text editor"
requires-python = ">=3.10"
keywords = ["hexdump", "base64", "sha256", "find", "elf", "dns", "http", "httpd", "editor"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
usrtools-help = "usrtools.helptext:main"
usrtools-hex = "usrtools.hexdump:main"
usrtools-encode = "usrtools.encode:main"
usrtools-env = "usrtools.environment:main"
usrtools-keyboard = "usrtools.keyboard:main"
usrtools-elf = "usrtools.elf:main"
usrtools-hash = "usrtools.digest:main"
usrtools-find = "usrtools.find:main"
usrtools-host = "usrtools.host:main"
usrtools-http = "usrtools.httpclient:main"
usrtools-httpd = "usrtools.httpd:main"
usrtools-edit = "usrtools.editor:main"

[tool.hatch.build.targets.wheel]
packages = ["usrtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
