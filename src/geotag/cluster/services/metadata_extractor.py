import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import piexif

from core.config import configs
from geotag.models.photo import PhotoRecord

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


class MetadataExtractor:
    """Builds PhotoRecords from the EXIF data of image files."""

    def __init__(self, utc_offset_hours: float = None):
        if utc_offset_hours is None:
            utc_offset_hours = configs.EXIF_UTC_OFFSET_HOURS
        self.default_tz = timezone(timedelta(hours=utc_offset_hours))

    def scan(self, root: Union[str, Path]) -> List[PhotoRecord]:
        """
        Walks `root` recursively. Files without readable EXIF are skipped;
        every other file becomes a PhotoRecord, whatever fields it lacks.
        """
        root = Path(root)
        if not root.is_dir():
            raise ValueError(f"Photo directory does not exist: {root}")

        logger.info(f"Scanning photos under {root}")
        photos = []
        for path in sorted(p for p in root.rglob("*") if p.is_file()):
            exif = self._export_exif_sync(str(path))
            if exif is None:
                continue
            photos.append(self._build_record(str(path), exif))

        logger.info(f"Found {len(photos)} photos with EXIF metadata.")
        return photos

    def extract(self, image_path: str) -> PhotoRecord:
        """Builds a record for a single file; a file without EXIF yields an empty record."""
        return self._build_record(image_path, self._export_exif_sync(image_path))

    def _build_record(self, path: str, exif: Optional[dict]) -> PhotoRecord:
        lat, lon = self._get_gps_from_exif(exif)
        timestamp = self._parse_datetime_from_exif(exif)
        logger.debug(f"{path}: timestamp={timestamp} lat={lat} lon={lon}")
        return PhotoRecord(path=path, timestamp=timestamp, lat=lat, lon=lon)

    def _export_exif_sync(self, img_input: Union[str, bytes]) -> Optional[dict]:
        """Synchronous helper for loading EXIF data from file path or bytes."""
        try:
            return piexif.load(img_input)
        except Exception as e:
            logger.debug(f"No EXIF loaded from {img_input if isinstance(img_input, str) else 'bytes'}: {e}")
            return None

    def _decode(self, value: Any) -> Optional[str]:
        if isinstance(value, bytes):
            try:
                return value.decode().strip("\x00 ")
            except UnicodeDecodeError:
                return None
        return value

    def _parse_datetime_from_exif(self, exif: Optional[dict]) -> Optional[float]:
        if exif is None:
            return None
        exif_0th = exif.get("0th", {})
        exif_exif = exif.get("Exif", {})
        dt_str = self._decode(exif_0th.get(piexif.ImageIFD.DateTime)) or self._decode(
            exif_exif.get(piexif.ExifIFD.DateTimeOriginal)
        )
        if not dt_str:
            return None

        try:
            base_dt = datetime.strptime(dt_str, EXIF_DATETIME_FORMAT)
        except ValueError:
            logger.debug(f"Unparseable EXIF date: {dt_str!r}")
            return None

        tz = self.default_tz
        offset_str = self._decode(exif_exif.get(piexif.ExifIFD.OffsetTimeOriginal))
        if offset_str:
            try:
                sign = -1 if offset_str[0] == "-" else 1
                h = int(offset_str[1:3])
                m = int(offset_str[4:6])
                tz = timezone(sign * timedelta(hours=h, minutes=m))
            except (ValueError, IndexError):
                logger.warning(f"Invalid OffsetTime format: {offset_str}")

        return base_dt.replace(tzinfo=tz).timestamp()

    def _get_gps_from_exif(self, exif: Optional[dict]) -> Tuple[Optional[float], Optional[float]]:
        if exif is None or not exif.get("GPS"):
            return None, None

        gps = exif["GPS"]

        def convert_coord(coord, ref):
            try:
                degrees, minutes, seconds = [x[0] / x[1] for x in coord]
            except (TypeError, ValueError, ZeroDivisionError, IndexError):
                return None
            result = degrees + (minutes / 60.0) + (seconds / 3600.0)
            ref = (self._decode(ref) or "").upper()
            return -result if ref in ("S", "W") else result

        lat = convert_coord(gps.get(piexif.GPSIFD.GPSLatitude), gps.get(piexif.GPSIFD.GPSLatitudeRef))
        lon = convert_coord(gps.get(piexif.GPSIFD.GPSLongitude), gps.get(piexif.GPSIFD.GPSLongitudeRef))

        if lat is None or lon is None:
            return None, None
        # (0, 0) usually means the GPS had no fix yet
        if lat == 0.0 and lon == 0.0:
            return None, None
        return lat, lon
