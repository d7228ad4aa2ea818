from .duplicate_service import KeepFirstPolicy, DeletionReport
from .file_service import FileService

__all__ = ["KeepFirstPolicy", "DeletionReport", "FileService"]
