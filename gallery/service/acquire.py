"""
Media acquisition.

Tries the bulk downloader first (gallery-dl or yt-dlp). When it fails or
leaves the workspace empty, scrapes the page's Open Graph / Twitter meta tags
and downloads the referenced media directly, bounded by the size cap.
"""

import time
from pathlib import Path
from urllib.parse import urljoin, urlparse

import requests
import yt_dlp
from bs4 import BeautifulSoup
from yt_dlp.utils import DownloadCancelled

from gallery.service.config import (
    get_downloader,
    get_http_timeout,
    get_max_bytes,
    get_tool_timeout,
)
from gallery.service.constants import (
    CONTENT_TYPE_EXTENSIONS,
    DEFAULT_EXTENSION,
    FALLBACK_FILENAME,
    FALLBACK_META_PROPERTIES,
    MAX_URL_EXTENSION_LENGTH,
    MEDIA_USER_AGENT,
    PAGE_USER_AGENT,
)
from gallery.service.errors import (
    FallbackFetchFailed,
    MediaTooLarge,
    NoMediaFound,
    PrimaryAcquireFailed,
)
from gallery.service.process import ToolFailed, run_command


def workspace_has_files(workspace):
    return any(p.is_file() for p in Path(workspace).rglob('*'))


def download_gallery_dl(url, workspace, timeout=None, logger=None):
    """
    Download with the gallery-dl binary into the workspace.

    Raises:
        PrimaryAcquireFailed: If gallery-dl is missing, fails or times out
    """
    if timeout is None:
        timeout = get_tool_timeout()

    try:
        run_command(['gallery-dl', '-D', str(workspace), url], timeout=timeout, logger=logger)
    except ToolFailed as e:
        raise PrimaryAcquireFailed(str(e))


def download_ytdlp(url, workspace, timeout=None, logger=None):
    """
    Download with yt-dlp (in-process) into the workspace.

    The whole download is capped at `timeout` seconds (default
    GIFSELECTOR_TOOL_TIMEOUT); each socket operation at GIFSELECTOR_HTTP_TIMEOUT.

    Raises:
        PrimaryAcquireFailed: If yt-dlp cannot extract or download the URL,
            fails in any other way, or runs past the timeout
    """
    if timeout is None:
        timeout = get_tool_timeout()
    deadline = time.monotonic() + timeout

    def progress_hook(d):
        if time.monotonic() > deadline:
            raise DownloadCancelled(f'yt-dlp timed out after {timeout}s')

    ydl_opts = {
        'format': 'best[ext=mp4]/best',
        'outtmpl': str(Path(workspace) / '%(id)s.%(ext)s'),
        'noplaylist': True,
        'socket_timeout': get_http_timeout(),
        'quiet': not logger,
        'progress_hooks': [progress_hook],
    }

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            ydl.download([url])
    except Exception as e:
        # Any yt-dlp failure, the timeout hook included, hands over to the fallback
        raise PrimaryAcquireFailed(f'yt-dlp failed: {e}')


PRIMARY_DOWNLOADERS = {
    'gallery-dl': download_gallery_dl,
    'yt-dlp': download_ytdlp,
}


def extract_media_url(html):
    """
    Find the media URL advertised by a page's meta tags.

    Checks og:video, og:video:url, og:image, twitter:image in that order and
    returns the first one present. Returns None if none is present.
    """
    soup = BeautifulSoup(html, 'html.parser')

    for prop in FALLBACK_META_PROPERTIES:
        for attr in ('property', 'name'):
            for tag in soup.find_all('meta', attrs={attr: prop, 'content': True}):
                content = tag['content'].strip()
                if content:
                    return content
    return None


def infer_extension(media_url, content_type=None):
    """
    Pick a file extension for fallback media.

    Uses the URL path's extension when present and plausible, otherwise the
    Content-Type, otherwise DEFAULT_EXTENSION.
    """
    ext = Path(urlparse(media_url).path).suffix.lower()
    if ext and len(ext) <= MAX_URL_EXTENSION_LENGTH:
        return ext

    mime_type = (content_type or '').split(';')[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(mime_type, DEFAULT_EXTENSION)


def _is_success(response):
    return 200 <= response.status_code < 300


def fetch_page(url, timeout=None, logger=None):
    """
    Fetch the HTML of the page being imported.

    Raises:
        FallbackFetchFailed: On connection errors or non-2xx status
    """

    def log(message):
        if logger:
            logger(message)

    if timeout is None:
        timeout = get_http_timeout()

    log(f'Fetching page: {url}')
    try:
        response = requests.get(url, headers={'User-Agent': PAGE_USER_AGENT}, timeout=timeout)
    except requests.RequestException as e:
        raise FallbackFetchFailed(f'Fallback fetch failed: {e}')

    if not _is_success(response):
        raise FallbackFetchFailed(f'Fallback fetch failed with status {response.status_code}')

    return response.text


def fetch_media(media_url, max_bytes=None, timeout=None, logger=None):
    """
    Download media bytes, enforcing the size cap.

    The declared Content-Length is checked before any of the body is read, and
    the streamed body is abandoned as soon as it grows past the cap.

    Returns:
        tuple: (bytes, content_type)

    Raises:
        FallbackFetchFailed: On connection errors or non-2xx status
        MediaTooLarge: If the declared or actual size exceeds max_bytes
    """

    def log(message):
        if logger:
            logger(message)

    if max_bytes is None:
        max_bytes = get_max_bytes()
    if timeout is None:
        timeout = get_http_timeout()

    log(f'Downloading media: {media_url}')
    try:
        response = requests.get(
            media_url,
            headers={'User-Agent': MEDIA_USER_AGENT},
            stream=True,
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise FallbackFetchFailed(f'Media fetch failed: {e}')

    try:
        if not _is_success(response):
            raise FallbackFetchFailed(f'Media fetch failed with status {response.status_code}')

        declared = response.headers.get('content-length')
        if declared and declared.isdigit() and int(declared) > max_bytes:
            raise MediaTooLarge(f'Media too large: {declared} bytes declared')

        content = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=65536):
                content.extend(chunk)
                if len(content) > max_bytes:
                    raise MediaTooLarge(f'Media too large: more than {max_bytes} bytes')
        except requests.RequestException as e:
            raise FallbackFetchFailed(f'Media fetch failed: {e}')

        content_type = response.headers.get('content-type', '')
    finally:
        response.close()

    log(f'Downloaded {len(content)} bytes')
    return bytes(content), content_type


def download_fallback(url, workspace, max_bytes=None, timeout=None, logger=None):
    """
    Scrape the page's meta tags and download the media they point to.

    Args:
        url: Page URL
        workspace: Directory to write into
        max_bytes: Size cap (default from settings)
        timeout: HTTP timeout in seconds (default from settings)
        logger: Optional callable(str) for logging

    Returns:
        Path: The written fallback-download<ext> file

    Raises:
        FallbackFetchFailed, NoMediaFound, MediaTooLarge
    """

    def log(message):
        if logger:
            logger(message)

    html = fetch_page(url, timeout=timeout, logger=logger)

    media_url = extract_media_url(html)
    if not media_url:
        raise NoMediaFound(f'No media meta tags found on {url}')
    # Relative meta content resolves against the page
    media_url = urljoin(url, media_url)
    log(f'Found media URL: {media_url}')

    content, content_type = fetch_media(
        media_url, max_bytes=max_bytes, timeout=timeout, logger=logger
    )

    ext = infer_extension(media_url, content_type)
    out_path = Path(workspace) / f'{FALLBACK_FILENAME}{ext}'
    out_path.write_bytes(content)
    log(f'Saved fallback media: {out_path.name}')
    return out_path


class MediaAcquirer:
    """
    Fills a workspace with whatever media a URL yields.

    Args:
        primary: Optional callable(url, workspace, logger=...) raising
            PrimaryAcquireFailed (default: downloader from settings)
        fallback: Optional callable(url, workspace, logger=...) (default:
            download_fallback)
    """

    def __init__(self, primary=None, fallback=None):
        if primary is None:
            backend = get_downloader()
            if backend not in PRIMARY_DOWNLOADERS:
                raise ValueError(f'Unknown downloader: {backend}')
            primary = PRIMARY_DOWNLOADERS[backend]
        self.primary = primary
        self.fallback = fallback or download_fallback

    def acquire(self, url, workspace, logger=None):
        """
        Run the primary downloader, then the fallback if it produced nothing.

        Returns:
            str: 'primary' or 'fallback', whichever filled the workspace

        Raises:
            FallbackFetchFailed, NoMediaFound, MediaTooLarge: From the fallback
        """

        def log(message):
            if logger:
                logger(message)

        try:
            self.primary(url, workspace, logger=logger)
            if workspace_has_files(workspace):
                return 'primary'
            log(f'Warning: downloader produced no files for {url}, trying fallback')
        except PrimaryAcquireFailed as e:
            log(f'Warning: {e}; trying fallback for {url}')

        self.fallback(url, workspace, logger=logger)
        return 'fallback'
