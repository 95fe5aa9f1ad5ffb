"""Photo scanner module - lists a folder (optionally recursively) and filters by supported image formats."""

import os
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

# Supported image extensions (case-insensitive)
SUPPORTED_EXTENSIONS = {'.jpg', '.jpeg'}


def is_supported(file_path: Path) -> bool:
    """Return True if the file has a supported image extension and is not hidden."""
    if file_path.name.startswith('.'):
        if file_path.suffix.lower() in SUPPORTED_EXTENSIONS:
            logger.debug(f"Skipping hidden file: {file_path}")
        return False
    return file_path.suffix.lower() in SUPPORTED_EXTENSIONS


def scan_folder(source_path: Path, recursive: bool = False, exclude: Optional[Path] = None) -> List[Path]:
    """
    Scan a folder for supported image files.

    Args:
        source_path: Path to the source folder to scan
        recursive: Walk subdirectories as well as the folder itself
        exclude: Directory to leave out of a recursive walk (usually the output root)

    Returns:
        Sorted list of Path objects for supported image files

    Raises:
        FileNotFoundError: If source_path doesn't exist
        NotADirectoryError: If source_path is not a directory
        PermissionError: If access to source_path is denied
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source folder does not exist: {source_path}")

    if not source_path.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {source_path}")

    excluded = exclude.resolve() if exclude is not None else None
    image_files = []

    try:
        if recursive:
            for root, dirs, files in os.walk(source_path):
                # Skip hidden directories and the output tree
                dirs[:] = [
                    d for d in dirs
                    if not d.startswith('.') and (Path(root) / d).resolve() != excluded
                ]

                for file in files:
                    file_path = Path(root) / file
                    if is_supported(file_path):
                        image_files.append(file_path)
                        logger.debug(f"Found image: {file_path}")
        else:
            for file_path in source_path.iterdir():
                if file_path.is_file() and is_supported(file_path):
                    image_files.append(file_path)
                    logger.debug(f"Found image: {file_path}")

    except PermissionError as e:
        logger.error(f"Permission denied while scanning {source_path}: {e}")
        raise

    image_files.sort()
    logger.info(f"Scanned {source_path}: found {len(image_files)} image files")
    return image_files
