"""
services/disk_service.py
Free-space readings for the volume holding the scan root.
"""
import logging
import shutil
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class DiskService:
    @staticmethod
    def usage(path: str) -> Optional[Tuple[int, int]]:
        """Returns (free, total) bytes, or None when the host cannot report them."""
        try:
            usage = shutil.disk_usage(path)
        except OSError as e:
            logger.debug(f"Disk usage unavailable for {path}: {e}")
            return None
        return usage.free, usage.total

    @staticmethod
    def freed(before: Optional[Tuple[int, int]], after: Optional[Tuple[int, int]]) -> Optional[int]:
        """Bytes gained between two readings, never negative; None if either is unknown."""
        if before is None or after is None:
            return None
        return max(0, after[0] - before[0])
