import io
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import piexif
import pytest
from PIL import Image


def jpeg_bytes(original: Optional[str] = None, modified: Optional[str] = None) -> bytes:
    """Build a small JPEG carrying the given EXIF DateTimeOriginal / DateTime strings."""
    img = Image.new("RGB", (16, 16), color="red")
    buffer = io.BytesIO()

    if original is None and modified is None:
        img.save(buffer, format="JPEG")
        return buffer.getvalue()

    exif_dict = {"0th": {}, "Exif": {}, "GPS": {}, "1st": {}, "thumbnail": None}
    if original is not None:
        exif_dict["Exif"][piexif.ExifIFD.DateTimeOriginal] = original.encode()
    if modified is not None:
        exif_dict["0th"][piexif.ImageIFD.DateTime] = modified.encode()

    img.save(buffer, format="JPEG", exif=piexif.dump(exif_dict))
    return buffer.getvalue()


def set_mtime(path: Path, when: datetime):
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def make_jpeg():
    """Write a JPEG to disk with optional EXIF dates and a chosen mtime."""

    def _make(path: Path, original=None, modified=None, mtime: Optional[datetime] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(jpeg_bytes(original, modified))
        if mtime is not None:
            set_mtime(path, mtime)
        return path

    return _make


@pytest.fixture
def input_dir(tmp_path):
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "out"
