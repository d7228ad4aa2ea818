"""
dupsweep — duplicate file finder and remover for one or more directory trees.

Core features:
- Two-phase detection: group by size, then by content hash inside each size group
- Pluggable hash algorithms: CRC32, MD5, SHA-1, xxHash64
- Interchangeable engine strategies: size-first (default) and hash-first
- Deterministic keeper selection (first file in path order)
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupsweep")
except Exception:
    from pathlib import Path as _Path
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API — only what users should import directly
from dupsweep.commands import ScanCommand
from dupsweep.core import (
    ScanParams, HashAlgorithmName, EngineStrategy, FileRecord, DuplicateGroup,
    ConfigurationError, HashingError,
)
from dupsweep.utils.convert_utils import ConvertUtils
from dupsweep.services import KeepFirstPolicy, DeletionReport
from dupsweep.services.file_service import FileService

__all__ = [
    "ScanCommand",
    "ScanParams",
    "HashAlgorithmName",
    "EngineStrategy",
    "FileRecord",
    "DuplicateGroup",
    "ConfigurationError",
    "HashingError",
    "ConvertUtils",
    "KeepFirstPolicy",
    "DeletionReport",
    "FileService",
    "__version__",
]
