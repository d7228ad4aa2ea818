"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing using pluggable hash algorithms.

Content is read sequentially in blocks of `block_size` bytes and folded into
an incremental hash state, so the digest does not depend on the block size.
Failures are raised as HashingError and never swallowed here: deciding what a
failed file means for its group is the engine's job.
"""

import zlib
import hashlib
import logging
from typing import Dict, Optional, Type, Union

import xxhash

from dupsweep.core.errors import ConfigurationError, HashingError
from dupsweep.core.models import FileRecord, HashAlgorithmName, DEFAULT_BLOCK_SIZE
from dupsweep.core.interfaces import Hasher, HashAlgorithm, HashState

logger = logging.getLogger(__name__)


class _CRC32State:
    """zlib.crc32 wrapped into the update()/digest() shape of hashlib objects."""

    def __init__(self):
        self._value = 0

    def update(self, data: bytes) -> None:
        self._value = zlib.crc32(data, self._value)

    def digest(self) -> bytes:
        return (self._value & 0xFFFFFFFF).to_bytes(4, "big")


# Use the same way to implement and use any other hashing algorithm
class CRC32AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.CRC32.value
    digest_size = 4

    def new(self) -> HashState:
        return _CRC32State()


class MD5AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.MD5.value
    digest_size = 16

    def new(self) -> HashState:
        return hashlib.md5()


class SHA1AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA1.value
    digest_size = 20

    def new(self) -> HashState:
        return hashlib.sha1()


class XXHashAlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.XXH64.value
    digest_size = 8

    def new(self) -> HashState:
        return xxhash.xxh64()


ALGORITHMS: Dict[HashAlgorithmName, Type[HashAlgorithm]] = {
    HashAlgorithmName.CRC32: CRC32AlgorithmImpl,
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
    HashAlgorithmName.SHA1: SHA1AlgorithmImpl,
    HashAlgorithmName.XXH64: XXHashAlgorithmImpl,
}


def get_algorithm(name: Union[str, HashAlgorithmName]) -> HashAlgorithm:
    """Returns an algorithm instance by enum or case-insensitive name."""
    if isinstance(name, str):
        try:
            name = HashAlgorithmName(name.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Hasher {name} is not supported. "
                f"Available: {', '.join(a.value for a in HashAlgorithmName)}"
            ) from None
    return ALGORITHMS[name]()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Streams each file through the algorithm in fixed-size blocks.
    """

    def __init__(self, algorithm: HashAlgorithm, block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size <= 0:
            raise ConfigurationError("Can't have 0 block size")
        self.algorithm = algorithm
        self.block_size = block_size

    @property
    def digest_size(self) -> int:
        return self.algorithm.digest_size

    def compute_digest(self, file: FileRecord) -> bytes:
        """
        Computes the digest of the whole file.
        Raises HashingError if the file can't be read or no longer has the
        size recorded for it.
        """
        return self.digest_path(file.path, expected_size=file.size)

    def digest_path(self, path: str, expected_size: Optional[int] = None) -> bytes:
        state = self.algorithm.new()
        bytes_read = 0
        try:
            with open(path, 'rb') as f:
                for chunk in iter(lambda: f.read(self.block_size), b''):
                    state.update(chunk)
                    bytes_read += len(chunk)
        except OSError as e:
            raise HashingError(path, f"Error reading content ({e.strerror or e})") from e

        if expected_size is not None and bytes_read != expected_size:
            raise HashingError(
                path, f"File size changed since scan ({expected_size} -> {bytes_read} bytes)"
            )

        digest = state.digest()
        if len(digest) != self.algorithm.digest_size:
            raise ValueError(
                f"{self.algorithm.name} produced {len(digest)} bytes, expected {self.algorithm.digest_size}"
            )
        return digest
