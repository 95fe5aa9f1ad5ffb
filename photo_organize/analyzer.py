"""Date resolver module - reads the EXIF capture time of a photo, falling back to file modification time."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple
import logging

from PIL import ExifTags, Image

from photo_organize.models import DateSource, ResolvedDate

logger = logging.getLogger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Consulted in priority order; the first one present wins
EXIF_DATE_FIELDS = ('DateTimeOriginal', 'DateTime')


class MetadataError(Exception):
    """Raised when a file's embedded metadata cannot be read."""


def read_exif_date_field(file_path: Path) -> Tuple[Optional[str], Optional[str]]:
    """
    Read the raw capture-time string from a photo's EXIF data.

    DateTimeOriginal lives in the Exif sub-IFD (some writers put it in IFD0 too),
    DateTime lives in IFD0.

    Args:
        file_path: Path to the image file

    Returns:
        (field name, raw value), or (None, None) if neither field is present

    Raises:
        MetadataError: If the file cannot be opened or its EXIF block is corrupt
    """
    try:
        with Image.open(file_path) as image:
            exif = image.getexif()
            if not exif:
                return None, None

            exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
            original = exif_ifd.get(ExifTags.Base.DateTimeOriginal)
            if original is None:
                original = exif.get(ExifTags.Base.DateTimeOriginal)
            if original is not None:
                return 'DateTimeOriginal', original

            modified = exif.get(ExifTags.Base.DateTime)
            if modified is not None:
                return 'DateTime', modified
    except Exception as e:
        raise MetadataError(str(e)) from e

    return None, None


def parse_exif_date(date_str) -> Optional[datetime]:
    """
    Parse an EXIF timestamp ("YYYY:MM:DD HH:MM:SS").

    Returns:
        datetime object or None if parsing fails
    """
    if isinstance(date_str, bytes):
        date_str = date_str.decode('ascii', errors='replace')
    if not isinstance(date_str, str):
        return None

    try:
        return datetime.strptime(date_str.strip('\x00 \t\r\n'), EXIF_DATE_FORMAT)
    except ValueError:
        return None


def get_mtime_date(file_path: Path) -> datetime:
    """Return the file modification time as a naive local datetime."""
    return datetime.fromtimestamp(file_path.stat().st_mtime)


def resolve_date(file_path: Path) -> ResolvedDate:
    """
    Determine the capture date of a photo.

    Priority: EXIF DateTimeOriginal -> EXIF DateTime -> file modification time.
    Metadata problems never raise; they are recorded as the fallback reason.

    Args:
        file_path: Path to the photo file

    Returns:
        ResolvedDate, always carrying a value

    Raises:
        OSError: If the file itself cannot be stat'ed
    """
    try:
        field, raw = read_exif_date_field(file_path)
    except MetadataError as e:
        logger.debug(f"Could not read EXIF from {file_path}: {e}")
        reason = f"unreadable: {e}"
    else:
        if field is None:
            logger.debug(f"No EXIF date found for {file_path}, using file mtime")
            reason = "no-exif"
        else:
            parsed = parse_exif_date(raw)
            if parsed is not None:
                return ResolvedDate(parsed, DateSource.EXIF, field=field)
            logger.debug(f"Could not parse EXIF {field} {raw!r} for {file_path}, using file mtime")
            reason = f"unparsable: {raw!r}"

    return ResolvedDate(get_mtime_date(file_path), DateSource.MTIME, reason=reason)
