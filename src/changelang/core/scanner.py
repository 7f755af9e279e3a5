"""File scanner for batch mode."""

from pathlib import Path
from typing import Iterable, List

from changelang.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    """Lower-case extensions and make sure they start with a dot."""
    return {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions if ext}


class FileScanner:
    """Find media files by extension."""

    def scan(self, path: Path, extensions: Iterable[str], recursive: bool = True) -> List[Path]:
        """Scan a path for files with the given extensions.

        Hidden files (our own in-flight temp files among them) are skipped.

        Args:
            path: Path to scan (file or directory)
            extensions: File extensions to include (e.g. "mkv" or ".mkv")
            recursive: If True, scan subdirectories recursively

        Returns:
            List of matching file paths, sorted by path

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If no extension is given, or path is not a file or directory
        """
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        wanted = normalize_extensions(extensions)
        if not wanted:
            raise ValueError("At least one file extension is required")

        if path.is_file():
            if path.suffix.lower() in wanted:
                return [path]
            logger.warning(
                "File extension not matched",
                file=str(path),
                extension=path.suffix,
                wanted=sorted(wanted),
            )
            return []

        if not path.is_dir():
            raise ValueError(f"Path is neither a file nor a directory: {path}")

        candidates = path.rglob("*") if recursive else path.glob("*")
        files = sorted(
            p
            for p in candidates
            if p.is_file() and p.suffix.lower() in wanted and not p.name.startswith(".")
        )

        logger.info(
            "Directory scan complete",
            directory=str(path),
            recursive=recursive,
            extensions=sorted(wanted),
            total_files=len(files),
        )
        return files
