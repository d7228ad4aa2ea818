"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File system operations used by the deletion policy.
Removal is permanent: there is no trash and no undo.
"""
import os
from pathlib import Path


class FileService:
    """
    Destructive file operations.
    """

    @staticmethod
    def remove_file(file_path: str) -> None:
        """
        Permanently removes a regular file.
        Raises FileNotFoundError if it vanished, OSError for any other failure.
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if path.is_dir():
            raise IsADirectoryError(f"Refusing to remove a directory: {path}")

        os.remove(path)
