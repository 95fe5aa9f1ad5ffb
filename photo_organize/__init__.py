"""photo-organize - sort photos into date-named folders based on EXIF capture time."""

__version__ = "0.1.0"
