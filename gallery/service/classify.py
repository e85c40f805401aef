"""
Workspace file classification.

Lists everything the acquirer wrote and keeps only importable media.
"""

from pathlib import Path

from gallery.service.constants import IMPORTABLE_EXTENSIONS
from gallery.service.errors import NoFilesDownloaded


def list_files(workspace):
    """All regular files under the workspace, depth-first"""
    return [p for p in sorted(Path(workspace).rglob('*')) if p.is_file()]


def classify_files(workspace, logger=None):
    """
    Find importable media files in a workspace.

    Args:
        workspace: Workspace directory
        logger: Optional callable(str) for logging

    Returns:
        list: Paths with a .gif, .webp or .mp4 extension (may be empty)

    Raises:
        NoFilesDownloaded: If the workspace holds no files at all
    """

    def log(message):
        if logger:
            logger(message)

    files = list_files(workspace)
    if not files:
        raise NoFilesDownloaded()

    candidates = [f for f in files if f.suffix.lower() in IMPORTABLE_EXTENSIONS]
    log(f'Acquired {len(files)} files, {len(candidates)} importable')
    return candidates
