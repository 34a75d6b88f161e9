"""Tests for app_io/photos.py: naming, cache layout and photo import."""
import os
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from PIL import Image

from floorsurvey.app_io.photos import (
    PhotoImportError,
    PhotoRole,
    PhotoScope,
    PhotoStore,
    make_photo_filename,
)

OWNER = uuid.UUID("0f8a3c52-9d1e-4b7a-a6c4-2e5f7b9d1c3a")
WHEN = datetime(2024, 3, 1, 9, 5, 7, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# make_photo_filename
# ---------------------------------------------------------------------------

class TestFilename:
    def test_layout(self):
        name = make_photo_filename(PhotoScope.INSTANCE, OWNER, PhotoRole.MAIN, "jpg", WHEN)
        assert name == "instance_0F8A3C52-9D1E-4B7A-A6C4-2E5F7B9D1C3A_main_20240301_090507.jpg"

    def test_leading_dot_in_extension(self):
        name = make_photo_filename(PhotoScope.ROOM_NOTE, OWNER, PhotoRole.EXTRA, ".png", WHEN)
        assert name.startswith("room_note_")
        assert name.endswith("_extra_20240301_090507.png")

    def test_timestamp_is_utc(self):
        local = WHEN.astimezone(timezone(timedelta(hours=2)))
        name = make_photo_filename(PhotoScope.TYPE, OWNER, PhotoRole.MAIN, "jpg", local)
        assert "_20240301_090507." in name


# ---------------------------------------------------------------------------
# PhotoStore
# ---------------------------------------------------------------------------

@pytest.fixture
def store(tmp_path):
    return PhotoStore(str(tmp_path / "cache"))


class TestPhotoStore:
    def test_directories_created(self, store):
        assert os.path.isdir(store.photos_dir)
        assert os.path.isdir(store.thumbnails_dir)
        assert os.path.isdir(store.tiles_dir)
        assert store.thumbnails_dir.startswith(store.photos_dir)

    def test_import_converts_to_jpeg(self, store, tmp_path):
        source = tmp_path / "pick.png"
        Image.new("RGBA", (400, 300), (200, 30, 30, 255)).save(source)

        photo = store.import_photo(str(source), PhotoScope.INSTANCE, OWNER, when=WHEN)

        assert photo.owner_id == OWNER
        assert photo.role is PhotoRole.MAIN
        assert photo.filename.endswith(".jpg")
        assert (photo.width, photo.height) == (400, 300)
        assert photo.size_bytes == os.path.getsize(photo.path)
        with Image.open(photo.path) as saved:
            assert saved.format == "JPEG"
        with Image.open(store.thumbnail_path(photo.filename)) as thumb:
            assert max(thumb.size) <= 112

    def test_non_image_is_rejected(self, store, tmp_path):
        source = tmp_path / "notes.txt"
        source.write_text("not a picture")
        with pytest.raises(PhotoImportError):
            store.import_photo(str(source), PhotoScope.TYPE, OWNER)
        assert os.listdir(store.photos_dir) == ["thumbs"]

    def test_missing_file_is_rejected(self, store, tmp_path):
        with pytest.raises(PhotoImportError):
            store.import_photo(str(tmp_path / "gone.jpg"), PhotoScope.TYPE, OWNER)
