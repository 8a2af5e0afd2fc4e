from datetime import datetime, timezone

import piexif
import pytest
from PIL import Image

from geotag.cluster.services.metadata_extractor import MetadataExtractor
from geotag.models.photo import LocationSource


def _save_jpeg(path, exif_dict=None):
    img = Image.new("RGB", (8, 8), color=(120, 80, 40))
    if exif_dict is None:
        img.save(path, "jpeg")
    else:
        img.save(path, "jpeg", exif=piexif.dump(exif_dict))
    return path


def _gps(lat_dms, lat_ref, lon_dms, lon_ref):
    return {
        piexif.GPSIFD.GPSLatitudeRef: lat_ref,
        piexif.GPSIFD.GPSLatitude: lat_dms,
        piexif.GPSIFD.GPSLongitudeRef: lon_ref,
        piexif.GPSIFD.GPSLongitude: lon_dms,
    }


@pytest.fixture
def extractor():
    return MetadataExtractor(utc_offset_hours=0)


def test_extract_time_and_signed_gps(tmp_path, extractor):
    path = _save_jpeg(tmp_path / "a.jpg", {
        "0th": {piexif.ImageIFD.DateTime: b"2020:01:02 03:04:05"},
        "GPS": _gps(((48, 1), (51, 1), (2400, 100)), b"N", ((2, 1), (21, 1), (0, 1)), b"W"),
    })

    photo = extractor.extract(str(path))

    assert photo.timestamp == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp()
    assert photo.lat == pytest.approx(48 + 51 / 60 + 24 / 3600)
    assert photo.lon == pytest.approx(-(2 + 21 / 60))
    assert photo.location_source == LocationSource.EXIF


def test_original_time_with_offset(tmp_path, extractor):
    path = _save_jpeg(tmp_path / "b.jpg", {
        "Exif": {
            piexif.ExifIFD.DateTimeOriginal: b"2020:01:02 03:04:05",
            piexif.ExifIFD.OffsetTimeOriginal: b"+02:00",
        },
    })

    photo = extractor.extract(str(path))

    assert photo.timestamp == datetime(2020, 1, 2, 1, 4, 5, tzinfo=timezone.utc).timestamp()
    assert photo.location is None


def test_default_offset_applies_to_naive_times(tmp_path):
    path = _save_jpeg(tmp_path / "c.jpg", {"0th": {piexif.ImageIFD.DateTime: b"2020:01:02 03:04:05"}})

    photo = MetadataExtractor(utc_offset_hours=9).extract(str(path))

    assert photo.timestamp == datetime(2020, 1, 1, 18, 4, 5, tzinfo=timezone.utc).timestamp()


def test_malformed_fields_are_left_unset(tmp_path, extractor):
    path = _save_jpeg(tmp_path / "d.jpg", {
        "0th": {piexif.ImageIFD.DateTime: b"not a date"},
        "GPS": _gps(((0, 0), (0, 0), (0, 0)), b"N", ((2, 1), (0, 1), (0, 1)), b"E"),
    })

    photo = extractor.extract(str(path))

    assert photo.timestamp is None
    assert photo.location is None


def test_zero_zero_means_no_fix(tmp_path, extractor):
    path = _save_jpeg(tmp_path / "e.jpg", {"GPS": _gps(((0, 1), (0, 1), (0, 1)), b"N", ((0, 1), (0, 1), (0, 1)), b"E")})

    assert extractor.extract(str(path)).location is None


def test_scan_keeps_photos_and_skips_unreadable_files(tmp_path, extractor):
    (tmp_path / "2020" / "trip").mkdir(parents=True)
    _save_jpeg(tmp_path / "2020" / "trip" / "a.jpg", {"0th": {piexif.ImageIFD.DateTime: b"2020:01:02 03:04:05"}})
    _save_jpeg(tmp_path / "b.jpg")
    (tmp_path / "notes.txt").write_text("not a photo")

    photos = extractor.scan(tmp_path)

    paths = sorted(p.path for p in photos)
    assert paths == sorted([str(tmp_path / "2020" / "trip" / "a.jpg"), str(tmp_path / "b.jpg")])
    bare = next(p for p in photos if p.path.endswith("b.jpg"))
    assert bare.timestamp is None and bare.location is None


def test_scan_missing_directory(tmp_path, extractor):
    with pytest.raises(ValueError):
        extractor.scan(tmp_path / "missing")
