"""
High-level operations that can be used by views and management commands.

This module provides testable functions that encapsulate business logic,
making it easy to test operations without going through Django views or
management commands.
"""

from pathlib import Path

from gallery.service.config import get_max_bytes, get_upload_dir
from gallery.service.constants import (
    DEFAULT_EXTENSION,
    MIME_TYPE_EXTENSIONS,
    STORABLE_EXTENSIONS,
)
from gallery.service.persist import generate_filename
from gallery.service.pipeline import ImportPipeline
from gallery.models import generate_slug
from gallery.storage import add_asset


class InvalidImportRequest(ValueError):
    """Raised when the import payload is not a list of URL strings"""

    pass


class InvalidUpload(ValueError):
    """Raised when an uploaded file is missing, too large or not GIF/WebP"""

    pass


def import_urls(urls, logger=None, pipeline=None):
    """
    Import media from a list of URLs.

    This is the core operation used by:
    - Web /api/import endpoint
    - Management command: ./manage.py import_urls

    Args:
        urls: List of URL strings
        logger: Optional callable(message) for logging
        pipeline: Optional ImportPipeline (default built from settings)

    Returns:
        list of ImportResult, one per URL in input order

    Raises:
        InvalidImportRequest: If urls is not a list of strings

    Example:
        >>> results = import_urls(['https://giphy.com/gifs/abc'])
        >>> results[0].success
    """
    if not isinstance(urls, list) or not all(isinstance(url, str) for url in urls):
        raise InvalidImportRequest('urls must be an array of strings.')

    if pipeline is None:
        pipeline = ImportPipeline(logger=logger)

    return pipeline.run(urls)


def resolve_upload_extension(original_name, content_type):
    """Keep a .gif/.webp name extension, else map the MIME type, else .gif"""
    ext = Path(original_name or '').suffix.lower()
    if ext in STORABLE_EXTENSIONS:
        return ext
    return MIME_TYPE_EXTENSIONS.get(content_type, DEFAULT_EXTENSION)


def store_upload(uploaded_file, logger=None):
    """
    Store a user-uploaded GIF/WebP file.

    Args:
        uploaded_file: Django UploadedFile (or None)
        logger: Optional callable(message) for logging

    Returns:
        Gif slug

    Raises:
        InvalidUpload: If the file is missing, too large or has the wrong type
    """

    def log(message):
        if logger:
            logger(message)

    if uploaded_file is None:
        raise InvalidUpload('No file uploaded.')

    if uploaded_file.content_type not in MIME_TYPE_EXTENSIONS:
        raise InvalidUpload('Only GIF or WebP uploads are allowed.')

    if uploaded_file.size > get_max_bytes():
        raise InvalidUpload('File too large')

    ext = resolve_upload_extension(uploaded_file.name, uploaded_file.content_type)
    filename = generate_filename(ext)
    upload_dir = get_upload_dir()
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / filename

    with open(target, 'wb') as f:
        for chunk in uploaded_file.chunks():
            f.write(chunk)

    try:
        slug = add_asset(
            slug=generate_slug(),
            filename=filename,
            original_name=uploaded_file.name,
            mime_type=uploaded_file.content_type,
            size_bytes=target.stat().st_size,
        )
    except Exception:
        target.unlink(missing_ok=True)
        raise

    log(f'Uploaded {uploaded_file.name} as {filename} (slug {slug})')
    return slug
