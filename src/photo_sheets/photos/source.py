"""
Module: photo_sheets.photos.source

Purpose:
    Folder listing collaborator. Finds image files under a folder and
    returns them as Photos in natural name order, which is the order they
    are paginated in.

Key Functions:
    - list_photos(): Scan a folder
    - natural_key(): Case-insensitive, numeric-aware sort key
    - sort_photos(): Deterministic ordering for any photo list
    - open_image(): Decode a photo's source

Dependencies:
    - PIL: Decoding

Used By:
    - photo_sheets.cli: Export command
    - photo_sheets.gui.main_window: Folder chooser
"""

from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from PIL import Image, ImageOps

from photo_sheets.layout.models import Photo

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tif", ".tiff"}

_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """
    Sort key comparing digit runs as numbers and text case-insensitively.

    Accents are folded so "Éclair" sorts next to "eclair".

    Example:
        >>> sorted(["img10.jpg", "IMG2.jpg", "img1.jpg"], key=natural_key)
        ['img1.jpg', 'IMG2.jpg', 'img10.jpg']
    """
    folded = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    parts = []
    for chunk in _DIGITS.split(folded):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return tuple(parts)


def sort_photos(photos: Iterable[Photo]) -> List[Photo]:
    """Natural order by name, ties broken by id so identical inputs sort identically."""
    return sorted(photos, key=lambda p: (natural_key(p.name), p.id))


def is_image_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def list_photos(folder: Path) -> List[Photo]:
    """
    List image files under folder (recursively).

    Args:
        folder: Folder chosen by the user

    Returns:
        Photos sorted for pagination; ids are posix paths relative to the
        folder's parent, so they include the folder name

    Example:
        >>> [p.id for p in list_photos(Path("holiday"))]
        ['holiday/img1.jpg', 'holiday/img2.jpg', 'holiday/img10.jpg']
    """
    folder = Path(folder)
    if not folder.is_dir():
        logger.warning(f"Photo folder does not exist: {folder}")
        return []

    photos = []
    for path in folder.rglob("*"):
        if not is_image_file(path):
            continue
        photo_id = path.relative_to(folder.parent).as_posix()
        photos.append(Photo(id=photo_id, name=path.name, source=path))

    photos = sort_photos(photos)
    logger.info(f"Found {len(photos)} photos in {folder}")
    return photos


def open_image(photo: Photo) -> Image.Image:
    """
    Decode a photo, honouring EXIF orientation.

    Raises:
        OSError: If the file cannot be read or decoded
    """
    source = photo.source
    if isinstance(source, Image.Image):
        return source.copy()
    with Image.open(source) as img:
        img.load()
        return ImageOps.exif_transpose(img)
