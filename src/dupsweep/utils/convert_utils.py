"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Byte count <-> human-readable size conversions for CLI input and reports.
"""
import re

_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMGTP]?)(I?B)?\s*$', re.IGNORECASE)
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512B, 1.50KB, 3.20MB).
        """
        if size_bytes < 1024:
            return f"{max(size_bytes, 0)}B"

        value = float(size_bytes)
        for unit in ["KB", "MB", "GB", "TB"]:
            value /= 1024
            if value < 1024:
                return f"{value:.2f}{unit}"
        return f"{value / 1024:.2f}PB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert a size string to bytes: '4096', '1K', '1.5MB', '2GiB'.
        Plain integers are bytes. Raises ValueError for anything else.
        """
        match = _SIZE_PATTERN.match(size_str or "")
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1000, 1K, 1.5MB, 2GiB"
            )
        number, unit, _ = match.groups()
        if unit == "" and "." in number:
            raise ValueError(f"Fractional byte count not allowed: '{size_str}'")
        return int(float(number) * _MULTIPLIERS[unit.upper()])
