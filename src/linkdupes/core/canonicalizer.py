"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/canonicalizer.py
Collapses paths that are already hardlinks to one physical file.
"""

import logging
import os
from typing import List, Optional, Set

from linkdupes.core.models import FileRecord, PhysicalId

logger = logging.getLogger(__name__)


def get_physical_id(path: str) -> Optional[PhysicalId]:
    """
    Returns (device, inode) for the file, or None when the platform reports no
    usable identity. On Windows st_ino carries the NTFS file index.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        logger.debug(f"Could not read physical identity of {path}: {e}")
        return None
    if not st.st_ino:
        return None
    return st.st_dev, st.st_ino


class HardlinkCanonicalizer:
    """
    Keeps one FileRecord per physical storage object.

    The first record seen for an identity wins; later paths sharing it are
    dropped. Records whose identity is unknown are always kept, since they can
    only be compared by content.
    """

    def canonicalize(self, records: List[FileRecord]) -> List[FileRecord]:
        seen: Set[PhysicalId] = set()
        unique = []
        for record in records:
            record.physical_id = get_physical_id(record.full_path)
            if record.physical_id is not None:
                if record.physical_id in seen:
                    logger.debug(f"Skipping existing hardlink: {record.relative_path}")
                    continue
                seen.add(record.physical_id)
            unique.append(record)

        dropped = len(records) - len(unique)
        if dropped:
            logger.info(f"Collapsed {dropped} pre-existing hardlinks")
        logger.info(f"Unique files to process: {len(unique)}")
        return unique
