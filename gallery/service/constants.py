"""
Media format constants.

Centralized definitions of file extensions, MIME types and scraping headers.
"""

# Extensions the classifier keeps from an acquired workspace
IMPORTABLE_EXTENSIONS = ['.gif', '.webp', '.mp4']

# Extensions that can be stored in the gallery
STORABLE_EXTENSIONS = ['.gif', '.webp']

EXTENSION_MIME_TYPES = {
    '.gif': 'image/gif',
    '.webp': 'image/webp',
}

MIME_TYPE_EXTENSIONS = {
    'image/gif': '.gif',
    'image/webp': '.webp',
}

# Used when the fallback media URL has no usable extension
CONTENT_TYPE_EXTENSIONS = {
    'video/mp4': '.mp4',
    'image/gif': '.gif',
    'image/webp': '.webp',
}

DEFAULT_EXTENSION = '.gif'

# Longest extension (including the dot) trusted from a URL path
MAX_URL_EXTENSION_LENGTH = 5

# Meta tags checked on the fallback page, in priority order
FALLBACK_META_PROPERTIES = [
    'og:video',
    'og:video:url',
    'og:image',
    'twitter:image',
]

FALLBACK_FILENAME = 'fallback-download'

# Identifying agent for the page fetch, generic browser agent for the media fetch
PAGE_USER_AGENT = 'gifselector/1.0 (+media import)'
MEDIA_USER_AGENT = (
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0 Safari/537.36'
)

WORKSPACE_PREFIX = 'import-'
