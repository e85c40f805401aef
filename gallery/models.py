from pathlib import Path

from django.conf import settings
from django.db import models
from nanoid import generate

SLUG_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
SLUG_LENGTH = 10


def generate_slug():
    """Generate a public share slug (NanoID, A-Z a-z 0-9)"""
    return generate(SLUG_ALPHABET, size=SLUG_LENGTH)


class Category(models.Model):
    """User-defined tag that gifs can be grouped under"""

    name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name


class Gif(models.Model):
    """A stored GIF or WebP asset, addressable by its public slug"""

    MIME_GIF = "image/gif"
    MIME_WEBP = "image/webp"

    MIME_TYPE_CHOICES = [
        (MIME_GIF, "GIF"),
        (MIME_WEBP, "WebP"),
    ]

    slug = models.CharField(max_length=32, unique=True, default=generate_slug, editable=False)

    # On-disk name inside GIFSELECTOR_UPLOAD_DIR
    filename = models.CharField(max_length=255)
    original_name = models.CharField(max_length=500)
    mime_type = models.CharField(max_length=50, choices=MIME_TYPE_CHOICES)
    size_bytes = models.BigIntegerField()

    categories = models.ManyToManyField(Category, related_name="gifs", blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.original_name} ({self.slug})"

    @property
    def extension(self):
        """Stored file extension without the dot, e.g. 'gif'"""
        ext = Path(self.filename).suffix.lower()
        if ext in (".gif", ".webp"):
            return ext[1:]
        return "gif"

    def get_absolute_file_path(self):
        """Get absolute path to the stored file"""
        return Path(settings.GIFSELECTOR_UPLOAD_DIR) / self.filename
