import os
from datetime import datetime

from PIL import Image

from photo_organize.analyzer import parse_exif_date, read_exif_date_field, resolve_date
from photo_organize.models import DateSource

MTIME = datetime(2019, 7, 4, 12, 30, 0)


class TestParseExifDate:
    def test_standard_format(self):
        assert parse_exif_date("2021:03:15 06:10:00") == datetime(2021, 3, 15, 6, 10, 0)

    def test_strips_nul_padding(self):
        assert parse_exif_date("2021:03:15 06:10:00\x00") == datetime(2021, 3, 15, 6, 10, 0)

    def test_bytes_value(self):
        assert parse_exif_date(b"2021:03:15 06:10:00") == datetime(2021, 3, 15, 6, 10, 0)

    def test_other_formats_rejected(self):
        assert parse_exif_date("2021-03-15 06:10:00") is None
        assert parse_exif_date("2021:03:15") is None

    def test_zeroed_date_rejected(self):
        assert parse_exif_date("0000:00:00 00:00:00") is None

    def test_empty_and_non_string(self):
        assert parse_exif_date("") is None
        assert parse_exif_date(None) is None
        assert parse_exif_date(42) is None


class TestReadExifDateField:
    def test_original_preferred_over_datetime(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg", original="2021:03:15 06:10:00", modified="2022:01:01 00:00:00")
        assert read_exif_date_field(path) == ("DateTimeOriginal", "2021:03:15 06:10:00")

    def test_datetime_used_when_original_absent(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg", modified="2022:01:01 09:00:00")
        assert read_exif_date_field(path) == ("DateTime", "2022:01:01 09:00:00")

    def test_no_exif(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg")
        assert read_exif_date_field(path) == (None, None)


class TestResolveDate:
    def test_exif_original_wins_over_mtime(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "IMG_0001.jpg", original="2021:03:15 06:10:00", mtime=MTIME)

        resolved = resolve_date(path)

        assert resolved.value == datetime(2021, 3, 15, 6, 10, 0)
        assert resolved.source is DateSource.EXIF
        assert resolved.field == "DateTimeOriginal"
        assert not resolved.is_fallback

    def test_exif_datetime_used_when_original_absent(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg", modified="2020:12:31 23:59:59", mtime=MTIME)

        resolved = resolve_date(path)

        assert resolved.value == datetime(2020, 12, 31, 23, 59, 59)
        assert resolved.field == "DateTime"

    def test_no_exif_falls_back_to_mtime(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg", mtime=MTIME)

        resolved = resolve_date(path)

        assert resolved.value == MTIME
        assert resolved.source is DateSource.MTIME
        assert resolved.reason == "no-exif"
        assert resolved.is_fallback

    def test_unparsable_exif_falls_back_to_mtime(self, tmp_path, make_jpeg):
        path = make_jpeg(tmp_path / "a.jpg", original="not a date", modified="2022:01:01 00:00:00", mtime=MTIME)

        resolved = resolve_date(path)

        # A present but invalid DateTimeOriginal does not fall through to DateTime
        assert resolved.value == MTIME
        assert resolved.reason.startswith("unparsable")

    def test_corrupt_file_falls_back_to_mtime(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"this is not a jpeg")
        os.utime(path, (MTIME.timestamp(), MTIME.timestamp()))

        resolved = resolve_date(path)

        assert resolved.value == MTIME
        assert resolved.reason.startswith("unreadable")

    def test_oversized_image_falls_back_to_mtime(self, tmp_path, make_jpeg, monkeypatch):
        path = make_jpeg(tmp_path / "panorama.jpg", original="2021:03:15 06:10:00", mtime=MTIME)
        # 16x16 is over twice this limit, so Pillow refuses to open it
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        resolved = resolve_date(path)

        assert resolved.value == MTIME
        assert resolved.source is DateSource.MTIME
        assert resolved.reason.startswith("unreadable")
