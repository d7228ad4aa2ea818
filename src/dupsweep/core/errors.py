"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception types shared by the scanner, hasher, engines and CLI.
"""


class DupsweepError(Exception):
    """Base class for all dupsweep errors."""


class ConfigurationError(DupsweepError, ValueError):
    """Invalid run configuration. Raised before any directory is scanned."""


class HashingError(DupsweepError, OSError):
    """
    A single file could not be hashed: open/read failure, or its content
    changed size between stat and hashing.
    """

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path
