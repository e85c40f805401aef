"""
Console and file logging.

Lines are printed to stdout and, when GIFSELECTOR_ENABLE_FILE_LOGGING is on,
appended to GIFSELECTOR_LOG_FILE (the file the access_stats command reads).
"""

import os
from datetime import datetime, timezone

from gallery.service.config import get_log_file


def timestamp():
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def write_log(message, log_path=None):
    """Print a timestamped line and append it to the log file if enabled"""
    line = f'[{timestamp()}] {message}'
    print(line)

    if log_path is None:
        log_path = get_log_file()
    if log_path:
        try:
            os.makedirs(os.path.dirname(log_path), exist_ok=True)
            with open(log_path, 'a') as f:
                f.write(f'{line}\n')
        except OSError as e:
            print(f'Failed to write to log file {log_path}: {e}')


def client_ip(request):
    return request.META.get('REMOTE_ADDR') or 'unknown-ip'


def describe_request(request):
    """'METHOD path from IP referer=... ua=...' summary of a request"""
    referer = request.META.get('HTTP_REFERER') or 'no-referer'
    user_agent = request.META.get('HTTP_USER_AGENT') or 'no-user-agent'
    return (
        f'{request.method} {request.get_full_path()} from {client_ip(request)} '
        f'referer={referer} ua={user_agent}'
    )
