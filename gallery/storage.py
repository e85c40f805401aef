"""
Metadata storage for gifs and categories.

Thin layer over the ORM used by the views, the import pipeline and the
management commands. The pipeline only needs add_asset().
"""

from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from gallery.models import Category, Gif


class CategoryNameRequired(Exception):
    """Raised when a category name is empty after trimming"""

    pass


class CategoryNameDuplicate(Exception):
    """Raised when a category with the same name already exists"""

    pass


class CategoryNotFound(Exception):
    """Raised when one or more category ids do not exist"""

    pass


def add_asset(slug, filename, original_name, mime_type, size_bytes):
    """
    Record a stored file.

    Args:
        slug: Public share slug
        filename: On-disk name inside the upload directory
        original_name: Name the file had before it was stored
        mime_type: 'image/gif' or 'image/webp'
        size_bytes: Stored file size

    Returns:
        str: The slug of the created record
    """
    gif = Gif.objects.create(
        slug=slug,
        filename=filename,
        original_name=original_name,
        mime_type=mime_type,
        size_bytes=size_bytes,
    )
    return gif.slug


def list_gifs():
    """All gifs, newest first, with categories prefetched"""
    return list(Gif.objects.prefetch_related('categories').all())


def gifs_by_category(identifier):
    """
    Gifs tagged with a category, looked up by id or name.

    A purely numeric identifier matches either the id or the name.
    """
    identifier = str(identifier).strip()
    if identifier.isdigit():
        condition = Q(categories__id=int(identifier)) | Q(categories__name=identifier)
    else:
        condition = Q(categories__name=identifier)
    return list(Gif.objects.filter(condition).distinct().prefetch_related('categories'))


def find_gif_by_slug(slug):
    return Gif.objects.filter(slug=slug).first()


def delete_gif_by_slug(slug):
    """Delete a gif row (the post_delete signal removes its file)"""
    deleted, _ = Gif.objects.filter(slug=slug).delete()
    return deleted > 0


def list_categories():
    """Categories ordered by name, each annotated with gif_count"""
    return list(Category.objects.annotate(gif_count=Count('gifs')).order_by('name'))


def add_category(name):
    trimmed = (name or '').strip() if isinstance(name, str) else ''
    if not trimmed:
        raise CategoryNameRequired('Category name is required.')
    if Category.objects.filter(name=trimmed).exists():
        raise CategoryNameDuplicate('Category name already exists.')
    try:
        with transaction.atomic():
            return Category.objects.create(name=trimmed)
    except IntegrityError:
        raise CategoryNameDuplicate('Category name already exists.')


def delete_category(category_id):
    deleted, _ = Category.objects.filter(id=category_id).delete()
    return deleted > 0


def _normalize_category_ids(category_ids):
    """Positive integer ids, de-duplicated, in first-seen order"""
    if not isinstance(category_ids, list):
        return []

    unique_ids = []
    for value in category_ids:
        if isinstance(value, bool):
            continue
        try:
            number = int(value)
        except (TypeError, ValueError):
            continue
        if isinstance(value, float) and value != number:
            continue
        if number > 0 and number not in unique_ids:
            unique_ids.append(number)
    return unique_ids


def set_gif_categories(slug, category_ids):
    """
    Replace the categories assigned to a gif.

    Returns:
        list of {'id', 'name'} dicts, or None if the gif does not exist

    Raises:
        CategoryNotFound: If any requested id is unknown
    """
    gif = find_gif_by_slug(slug)
    if gif is None:
        return None

    unique_ids = _normalize_category_ids(category_ids)
    found = {c.id: c for c in Category.objects.filter(id__in=unique_ids)}
    if len(found) != len(unique_ids):
        raise CategoryNotFound('One or more categories do not exist.')

    with transaction.atomic():
        gif.categories.set([found[i] for i in unique_ids])

    return [{'id': i, 'name': found[i].name} for i in unique_ids]
