"""Data model shared by the scanner, date resolver and placement stages."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class DateSource(Enum):
    EXIF = 'exif'
    MTIME = 'mtime'


@dataclass(frozen=True)
class ResolvedDate:
    """
    Result of date resolution.

    Always carries a value. When the EXIF date could not be used, ``source`` is
    ``DateSource.MTIME`` and ``reason`` says why (no EXIF, unreadable file or
    unparsable timestamp).
    """

    value: datetime
    source: DateSource
    field: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.source is DateSource.MTIME


class PhotoStatus(Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class PhotoFile:
    """A candidate image found by the scanner."""

    def __init__(self, source: Path):
        self.source = source.absolute()
        self.extension = source.suffix.lower()
        self.captured: Optional[ResolvedDate] = None
        self.status = PhotoStatus.PENDING

    def __repr__(self):
        return f"PhotoFile(source={self.source}, captured={self.captured}, status={self.status.value})"


class Outcome(Enum):
    WOULD_COPY = 'would-copy'
    WOULD_MOVE = 'would-move'
    COPIED = 'copied'
    MOVED = 'moved'
    SKIPPED_COLLISION = 'skipped-collision'
    FAILED = 'failed'

    @property
    def is_planned(self) -> bool:
        return self in (Outcome.WOULD_COPY, Outcome.WOULD_MOVE)


@dataclass
class PlacementDecision:
    photo: PhotoFile
    destination_dir: Optional[Path]
    destination: Optional[Path]
    outcome: Outcome
    error: Optional[str] = None
    operation: str = 'copy'

    def describe(self) -> str:
        """Human-readable action line for the log."""
        source = self.photo.source
        if self.outcome is Outcome.WOULD_COPY:
            return f"Would copy {source} -> {self.destination}"
        if self.outcome is Outcome.WOULD_MOVE:
            return f"Would move {source} -> {self.destination}"
        if self.outcome is Outcome.COPIED:
            return f"Copied {source} -> {self.destination}"
        if self.outcome is Outcome.MOVED:
            return f"Moved {source} -> {self.destination}"
        if self.outcome is Outcome.SKIPPED_COLLISION:
            return f"Cannot {self.operation} {source} to {self.destination} because the filename already exists"
        if self.destination is None:
            return f"Failed to process {source}: {self.error}"
        return f"Failed to {self.operation} {source} to {self.destination}: {self.error}"
