"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Cross-platform file operations used to resolve duplicates.
Provides delete, trash, symlink, hardlink and Windows shortcut replacement.
"""
import logging
import os
import subprocess
import sys
from pathlib import Path

from send2trash import send2trash

logger = logging.getLogger(__name__)

SHORTCUT_SUFFIX = ".lnk"
_TEMP_SUFFIX = ".linkdupes-tmp"


class FileService:
    """
    Each operation acts on one redundant copy and raises on failure
    (OSError from the filesystem, RuntimeError from trash/shortcut helpers),
    leaving error containment to the caller.
    """

    @staticmethod
    def remove(file_path: str) -> None:
        """Unlinks the file; no replacement object is created."""
        os.remove(file_path)

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def replace_with_symlink(file_path: str, target: str) -> None:
        """Replaces file_path with a symbolic link to the absolute target path."""
        FileService._replace(file_path, lambda tmp: os.symlink(os.path.abspath(target), tmp))

    @staticmethod
    def replace_with_hardlink(file_path: str, target: str) -> None:
        """Replaces file_path with a new hardlink to target's physical file."""
        FileService._replace(file_path, lambda tmp: os.link(target, tmp))

    @staticmethod
    def _replace(file_path: str, make_link) -> None:
        """
        Creates the link under a temporary sibling name and renames it over the
        original, so a failed link never leaves the path empty.
        """
        if not os.path.lexists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        tmp_path = FileService._free_temp_name(file_path)
        make_link(tmp_path)
        try:
            os.replace(tmp_path, file_path)
        except OSError:
            os.remove(tmp_path)
            raise

    @staticmethod
    def _free_temp_name(file_path: str) -> str:
        """First sibling name of the form <path>.linkdupes-tmp<pid>[.N] that does not exist."""
        base = f"{file_path}{_TEMP_SUFFIX}{os.getpid()}"
        candidate = base
        counter = 0
        while os.path.lexists(candidate):
            counter += 1
            candidate = f"{base}.{counter}"
        return candidate

    @staticmethod
    def replace_with_shortcut(file_path: str, target: str) -> str:
        """
        Windows only: writes '<file_path>.lnk' pointing at target, then removes
        the original. Returns the shortcut path.
        """
        if sys.platform != "win32":
            raise RuntimeError(f"Shortcut files are not supported on {sys.platform}")
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        shortcut_path = file_path + SHORTCUT_SUFFIX
        script = (
            "$s = (New-Object -ComObject WScript.Shell).CreateShortcut({lnk}); "
            "$s.TargetPath = {target}; $s.Save()"
        ).format(lnk=FileService._ps_quote(shortcut_path),
                 target=FileService._ps_quote(os.path.abspath(target)))

        try:
            subprocess.run(
                ["powershell", "-NoProfile", "-NonInteractive", "-Command", script],
                check=True, capture_output=True, timeout=30
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise RuntimeError(f"Failed to create shortcut: {e}") from e

        os.remove(file_path)
        return shortcut_path

    @staticmethod
    def _ps_quote(value: str) -> str:
        """Single-quoted PowerShell literal."""
        return "'" + value.replace("'", "''") + "'"
