"""
Per-URL import workspaces.

Each URL is processed inside its own uniquely named import-* directory, which
is removed when processing ends no matter how it ended.
"""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path

from gallery.service.config import get_tmp_dir
from gallery.service.constants import WORKSPACE_PREFIX


def create_workspace(tmp_dir=None):
    """Create a fresh import-* directory and return its path"""
    tmp_dir = Path(tmp_dir) if tmp_dir else get_tmp_dir()
    tmp_dir.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=tmp_dir))


def remove_workspace(workspace, logger=None):
    """Recursively remove a workspace. Failures are logged, never raised."""

    def log(message):
        if logger:
            logger(message)

    try:
        shutil.rmtree(workspace)
    except FileNotFoundError:
        pass
    except OSError as e:
        log(f'Failed to remove workspace {workspace}: {e}')


@contextmanager
def import_workspace(tmp_dir=None, logger=None):
    """
    Context manager yielding a new workspace path and always removing it.

    Example:
        >>> with import_workspace() as workspace:
        ...     (workspace / 'file.gif').write_bytes(b'GIF89a')
    """
    workspace = create_workspace(tmp_dir)
    try:
        yield workspace
    finally:
        remove_workspace(workspace, logger=logger)
