from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..core.stable_id import new_id

logger = logging.getLogger(__name__)

DEFAULT_FOLDER_NAME = 'FloorSurvey'
PHOTOS_DIR = 'photos'
TILES_DIR = 'tiles'
THUMBNAILS_DIR = 'thumbs'
JPEG_QUALITY = 85
THUMBNAIL_SIZE = (112, 112)
TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'


class PhotoScope(Enum):
    TYPE = 'TYPE'
    INSTANCE = 'INSTANCE'
    ROOM_NOTE = 'ROOM_NOTE'


class PhotoRole(Enum):
    MAIN = 'MAIN'
    EXTRA = 'EXTRA'


class PhotoImportError(ValueError):
    """Raised when a picked file cannot be read as an image."""


@dataclass(frozen=True)
class Photo:
    id: uuid.UUID
    scope: PhotoScope
    role: PhotoRole
    owner_id: uuid.UUID
    filename: str
    path: str
    width: int
    height: int
    size_bytes: int
    created_at: datetime


def make_photo_filename(
    scope: PhotoScope,
    owner_id: uuid.UUID,
    role: PhotoRole,
    ext: str = 'jpg',
    when: Optional[datetime] = None,
) -> str:
    """``<scope>_<OWNER-UUID>_<role>_<yyyyMMdd_HHmmss>.<ext>``, timestamp in UTC."""
    if ext.startswith('.'):
        ext = ext[1:]
    when = when or datetime.now(timezone.utc)
    if when.tzinfo is not None:
        when = when.astimezone(timezone.utc)
    stamp = when.strftime(TIMESTAMP_FORMAT)
    return f"{scope.value.lower()}_{str(owner_id).upper()}_{role.value.lower()}_{stamp}.{ext}"


class PhotoStore:
    """Local file cache holding survey photos and rendered plan tiles."""

    def __init__(self, base_dir: Optional[str] = None) -> None:
        if base_dir is None:
            base_dir = os.path.join(os.path.expanduser('~'), '.' + DEFAULT_FOLDER_NAME.lower())
        self.base_dir = base_dir
        self.ensure_directories()

    @property
    def photos_dir(self) -> str:
        return os.path.join(self.base_dir, PHOTOS_DIR)

    @property
    def tiles_dir(self) -> str:
        return os.path.join(self.base_dir, TILES_DIR)

    @property
    def thumbnails_dir(self) -> str:
        return os.path.join(self.photos_dir, THUMBNAILS_DIR)

    def ensure_directories(self) -> None:
        for path in (self.base_dir, self.photos_dir, self.thumbnails_dir, self.tiles_dir):
            os.makedirs(path, exist_ok=True)

    def photo_path(self, filename: str) -> str:
        return os.path.join(self.photos_dir, filename)

    def thumbnail_path(self, filename: str) -> str:
        return os.path.join(self.thumbnails_dir, filename)

    def tile_path(self, name: str) -> str:
        return os.path.join(self.tiles_dir, name)

    def import_photo(
        self,
        source: str,
        scope: PhotoScope,
        owner_id: uuid.UUID,
        role: PhotoRole = PhotoRole.MAIN,
        when: Optional[datetime] = None,
    ) -> Photo:
        """Copy *source* into the store as a JPEG and write its thumbnail.

        EXIF orientation is applied before saving so width and height describe
        the image as it is displayed.
        """
        when = when or datetime.now(timezone.utc)
        try:
            with Image.open(source) as img:
                img = ImageOps.exif_transpose(img)
                if img.mode != 'RGB':
                    img = img.convert('RGB')
                filename = make_photo_filename(scope, owner_id, role, 'jpg', when)
                path = self.photo_path(filename)
                img.save(path, format='JPEG', quality=JPEG_QUALITY)
                width, height = img.size
                thumb = img.copy()
                thumb.thumbnail(THUMBNAIL_SIZE)
                thumb.save(self.thumbnail_path(filename), format='JPEG', quality=JPEG_QUALITY)
        except (OSError, UnidentifiedImageError) as e:
            raise PhotoImportError(f"Cannot import photo {source}: {e}") from e

        photo = Photo(
            id=new_id(),
            scope=scope,
            role=role,
            owner_id=owner_id,
            filename=filename,
            path=path,
            width=width,
            height=height,
            size_bytes=os.path.getsize(path),
            created_at=when,
        )
        logger.info("Imported photo %s (%dx%d)", filename, width, height)
        return photo
