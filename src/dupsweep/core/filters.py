"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filters.py
Candidate filter: decides from size and filename whether a file takes part in
duplicate detection.

Masks are regular expressions matched with `search` (a mask may hit any part
of the filename). A mask that does not compile as a regular expression, such
as `*.txt`, is read as a shell-style glob instead.
"""

import re
import fnmatch
import logging
from typing import List, Optional, Pattern

from dupsweep.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def compile_mask(mask: str) -> Pattern:
    """Compile one filename mask (regex first, glob fallback)."""
    try:
        return re.compile(mask)
    except re.error as regex_error:
        try:
            pattern = re.compile(fnmatch.translate(mask))
        except re.error:
            raise ConfigurationError(f"Invalid file mask '{mask}': {regex_error}") from None
        logger.debug(f"Mask '{mask}' is not a regular expression, using it as a glob")
        return pattern


def compile_masks(masks: Optional[List[str]]) -> List[Pattern]:
    return [compile_mask(mask) for mask in masks or [] if mask]


class CandidateFilter:
    """
    Stateless predicate over (size, filename).

    Attributes:
        min_size: Minimum file size in bytes
        masks: Compiled filename patterns, OR-combined; empty means "match all"
    """

    def __init__(self, min_size: int = 1, masks: Optional[List[str]] = None):
        if min_size < 0:
            raise ConfigurationError("Minimum size cannot be negative")
        self.min_size = min_size
        self.masks = compile_masks(masks)

    def accepts(self, size: int, filename: str) -> bool:
        return self.size_passes(size) and self.mask_passes(filename)

    def size_passes(self, size: int) -> bool:
        return size >= self.min_size

    def mask_passes(self, filename: str) -> bool:
        if not self.masks:
            return True
        return any(pattern.search(filename) for pattern in self.masks)

    def __repr__(self):
        return f"<CandidateFilter min_size={self.min_size}, masks={[p.pattern for p in self.masks]}>"
