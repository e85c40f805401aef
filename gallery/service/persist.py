"""
Permanent storage of import results.

Copies a final artifact into the upload directory under a generated unique
name and records it through the storage layer.
"""

import shutil
import time
from dataclasses import dataclass
from pathlib import Path

from nanoid import generate

from gallery.models import generate_slug
from gallery.service.config import get_upload_dir
from gallery.service.constants import EXTENSION_MIME_TYPES


@dataclass
class StoredAsset:
    """Information about a stored file"""

    slug: str
    filename: str
    original_name: str
    mime_type: str
    size_bytes: int


def generate_filename(ext):
    """Unique on-disk name: {epoch millis}-{6 random chars}{ext}"""
    return f'{int(time.time() * 1000)}-{generate(size=6)}{ext}'


def mime_type_for(path):
    return EXTENSION_MIME_TYPES.get(Path(path).suffix.lower(), 'image/gif')


class MediaPersister:
    """
    Stores final artifacts.

    Args:
        upload_dir: Optional storage directory (default from settings)
        add_asset: Optional storage callable(slug=..., filename=...,
            original_name=..., mime_type=..., size_bytes=...) returning the slug
            (default: gallery.storage.add_asset)
    """

    def __init__(self, upload_dir=None, add_asset=None):
        if add_asset is None:
            from gallery.storage import add_asset
        self.upload_dir = Path(upload_dir) if upload_dir else get_upload_dir()
        self.add_asset = add_asset

    def persist(self, artifact, original_name=None, logger=None):
        """
        Copy an artifact into storage and record its metadata.

        The copied file is removed again if recording fails.

        Returns:
            StoredAsset
        """

        def log(message):
            if logger:
                logger(message)

        artifact = Path(artifact)
        ext = artifact.suffix.lower()
        filename = generate_filename(ext)
        target = self.upload_dir / filename

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(artifact, target)
        size_bytes = target.stat().st_size

        asset = StoredAsset(
            slug=generate_slug(),
            filename=filename,
            original_name=original_name or artifact.name,
            mime_type=mime_type_for(artifact),
            size_bytes=size_bytes,
        )

        try:
            asset.slug = self.add_asset(
                slug=asset.slug,
                filename=asset.filename,
                original_name=asset.original_name,
                mime_type=asset.mime_type,
                size_bytes=asset.size_bytes,
            )
        except Exception:
            target.unlink(missing_ok=True)
            raise

        log(f'Stored {asset.original_name} as {filename} (slug {asset.slug}, {size_bytes} bytes)')
        return asset
