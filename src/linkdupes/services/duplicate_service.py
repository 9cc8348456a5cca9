"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Resolution of duplicate groups: pick the survivor, act on every other member.
"""
import logging
from typing import Callable, Dict, List, Optional

from linkdupes.core.models import (
    Action, DeduplicationParams, DuplicateGroup, FileRecord, OutcomeStatus, ResolutionOutcome)
from linkdupes.core.sorter import Sorter
from linkdupes.services.file_service import FileService
from linkdupes.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class DuplicateService:
    """
    Applies the configured action to all but one file per group.

    Failures are contained per file: a vanished file, a permission error or a
    failed link is logged and recorded as a FAILED outcome, and processing
    moves on to the next member. Dry-run never touches the filesystem.
    """

    @staticmethod
    def resolve(
            groups: List[DuplicateGroup],
            params: DeduplicationParams,
            listener: Optional[Callable[[ResolutionOutcome], None]] = None
    ) -> List[ResolutionOutcome]:
        """
        Args:
            groups: Duplicate groups, members in enumeration order
            params: keep policy, action, dry-run flag
            listener: Optional callback receiving each outcome as it happens
        Returns:
            One ResolutionOutcome per non-kept file
        """
        logger.info("Processing groups...")
        outcomes = []
        Sorter.sort_files_inside_groups(groups, params.keep)

        for group in groups:
            keep_file = group.files[0]
            logger.info(f"Group {group.key}: Keeping {keep_file.relative_path} "
                        f"(modified {ConvertUtils.ns_to_human(keep_file.modified_time)})")

            for dup in group.files[1:]:
                outcome = DuplicateService._resolve_one(dup, keep_file, params)
                outcomes.append(outcome)
                if listener:
                    listener(outcome)

        return outcomes

    @staticmethod
    def _resolve_one(dup: FileRecord, keep_file: FileRecord, params: DeduplicationParams) -> ResolutionOutcome:
        if params.dry_run:
            logger.info(f"  [DRY RUN] {dup.relative_path} -> {params.action.value}")
            return ResolutionOutcome(dup.full_path, keep_file.full_path, params.action, OutcomeStatus.DRY_RUN)

        try:
            DuplicateService.apply_action(params.action, dup.full_path, keep_file.full_path)
        except (OSError, RuntimeError) as e:
            logger.warning(f"  Failed to {params.action.value} {dup.relative_path}: {e}")
            return ResolutionOutcome(dup.full_path, keep_file.full_path, params.action,
                                     OutcomeStatus.FAILED, error=str(e))

        logger.info(f"  {params.action.past_tense} {dup.relative_path}")
        return ResolutionOutcome(dup.full_path, keep_file.full_path, params.action, OutcomeStatus.DONE)

    @staticmethod
    def apply_action(action: Action, path: str, keep_path: str) -> None:
        """Dispatches one action; unsupported hosts were rejected when params were built."""
        if action == Action.DELETE:
            FileService.remove(path)
        elif action == Action.TRASH:
            FileService.move_to_trash(path)
        elif action == Action.SYMLINK:
            FileService.replace_with_symlink(path, keep_path)
        elif action == Action.HARDLINK:
            FileService.replace_with_hardlink(path, keep_path)
        elif action == Action.SHORTCUT:
            FileService.replace_with_shortcut(path, keep_path)
        else:
            raise ValueError(f"Unknown action: {action}")

    @staticmethod
    def summarize(outcomes: List[ResolutionOutcome]) -> Dict[OutcomeStatus, int]:
        """Counts outcomes by status."""
        counts = {status: 0 for status in OutcomeStatus}
        for outcome in outcomes:
            counts[outcome.status] += 1
        return counts
