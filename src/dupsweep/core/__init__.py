"""
Core duplicate detection engine — scanner, filter, hasher, grouper and engines.

This package contains the foundation of dupsweep:
- FileScannerImpl: depth-limited directory walking with exclusions
- CandidateFilter: minimum size and filename mask predicate
- HasherImpl + CRC32/MD5/SHA1/XXHash algorithms: block-wise full content hashing
- FileGrouperImpl: size and digest grouping with per-file failure isolation
- SizeFirstEngine / HashFirstEngine: interchangeable duplicate detection strategies
- Models: FileRecord, DuplicateGroup, ScanParams, ScanStats

All components are pure Python with no UI dependencies.
"""

from .errors import DupsweepError, ConfigurationError, HashingError
from .models import (
    FileRecord, DuplicateGroup, ScanParams, ScanStats, HashAlgorithmName, EngineStrategy,
    DEFAULT_BLOCK_SIZE, DEFAULT_MIN_SIZE)
from .filters import CandidateFilter, compile_mask, compile_masks
from .hasher import (
    HasherImpl, CRC32AlgorithmImpl, MD5AlgorithmImpl, SHA1AlgorithmImpl, XXHashAlgorithmImpl,
    get_algorithm)
from .grouper import FileGrouperImpl
from .engine import SizeFirstEngine, HashFirstEngine, create_engine, find_duplicates
from .scanner import FileScannerImpl

__all__ = [
    "DupsweepError",
    "ConfigurationError",
    "HashingError",
    "FileRecord",
    "DuplicateGroup",
    "ScanParams",
    "ScanStats",
    "HashAlgorithmName",
    "EngineStrategy",
    "DEFAULT_BLOCK_SIZE",
    "DEFAULT_MIN_SIZE",
    "CandidateFilter",
    "compile_mask",
    "compile_masks",
    "HasherImpl",
    "CRC32AlgorithmImpl",
    "MD5AlgorithmImpl",
    "SHA1AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "get_algorithm",
    "FileGrouperImpl",
    "SizeFirstEngine",
    "HashFirstEngine",
    "create_engine",
    "find_duplicates",
    "FileScannerImpl",
]
