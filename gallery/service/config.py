"""
Configuration adapter for gallery settings.

Centralizes access to Django settings, ensuring consistent configuration
across the CLI and the web app.
"""

from pathlib import Path

from django.conf import settings


def get_upload_dir():
    """Get the permanent storage directory"""
    return Path(settings.GIFSELECTOR_UPLOAD_DIR)


def get_tmp_dir():
    """Get the directory that holds per-URL import workspaces"""
    return Path(settings.GIFSELECTOR_TMP_DIR)


def get_frontend_dist():
    return Path(settings.GIFSELECTOR_FRONTEND_DIST)


def get_base_path():
    return settings.GIFSELECTOR_BASE_PATH


def get_max_bytes():
    """Size cap for uploads, fallback downloads and final artifacts"""
    return settings.GIFSELECTOR_MAX_BYTES


def get_allowed_domains():
    """
    Get the import domain allow-list.

    Returns:
        list: Lowercased hostnames without a trailing dot
    """
    return [
        domain.strip().lower().rstrip('.')
        for domain in settings.GIFSELECTOR_IMPORT_ALLOWED_DOMAINS
        if domain and domain.strip()
    ]


def get_downloader():
    """
    Get the primary downloader backend.

    Returns:
        str: 'gallery-dl' or 'yt-dlp'
    """
    return settings.GIFSELECTOR_DOWNLOADER


def get_tool_timeout():
    """Seconds allowed for one external tool invocation"""
    return settings.GIFSELECTOR_TOOL_TIMEOUT


def get_http_timeout():
    """Seconds allowed for one HTTP request"""
    return settings.GIFSELECTOR_HTTP_TIMEOUT


def get_log_file():
    """Get the access log path, or None when file logging is disabled"""
    if not settings.GIFSELECTOR_ENABLE_FILE_LOGGING:
        return None
    return Path(settings.GIFSELECTOR_LOG_FILE)


def get_stats_file():
    return Path(settings.GIFSELECTOR_STATS_FILE)
