from .duplicate_service import DuplicateService
from .file_service import FileService
from .disk_service import DiskService

__all__ = ["DuplicateService", "FileService", "DiskService"]
