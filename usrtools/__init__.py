"""Small command-line tools: dumps, digests, search, networking and a text editor."""

__version__ = "0.1.0"