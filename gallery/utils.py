from django.conf import settings


def build_share_url(request, gif):
    """
    Build the canonical public URL for a gif: <origin><base>/share/<slug>.<ext>

    Honors X-Forwarded-Proto (first value) when behind a proxy.
    """
    forwarded_proto = request.META.get('HTTP_X_FORWARDED_PROTO')
    if forwarded_proto:
        scheme = forwarded_proto.split(',')[0].strip()
    else:
        scheme = request.scheme
    host = request.get_host()
    base_path = settings.GIFSELECTOR_BASE_PATH.rstrip('/')
    return f'{scheme}://{host}{base_path}/share/{gif.slug}.{gif.extension}'


def serialize_gif(request, gif):
    return {
        'id': gif.id,
        'slug': gif.slug,
        'originalName': gif.original_name,
        'mimeType': gif.mime_type,
        'sizeBytes': gif.size_bytes,
        'createdAt': gif.created_at.isoformat(),
        'shareUrl': build_share_url(request, gif),
        'categories': [{'id': c.id, 'name': c.name} for c in gif.categories.all()],
    }


def serialize_category(category, gif_count=None):
    if gif_count is None:
        gif_count = getattr(category, 'gif_count', 0)
    return {
        'id': category.id,
        'name': category.name,
        'createdAt': category.created_at.isoformat(),
        'gifCount': gif_count,
    }
