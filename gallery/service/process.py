"""
External tool invocation.

Runs downloader and converter binaries found on PATH and turns every kind of
failure (missing binary, non-zero exit, timeout) into ToolFailed.
"""

import subprocess


class ToolFailed(Exception):
    """Raised when an external tool could not produce a result"""

    pass


def run_command(cmd, timeout=None, logger=None):
    """
    Run an external command and wait for it to finish.

    Args:
        cmd: Command as a list of strings
        timeout: Optional timeout in seconds
        logger: Optional callable(str) for logging

    Returns:
        subprocess.CompletedProcess

    Raises:
        ToolFailed: If the tool is missing, times out or exits non-zero
    """

    def log(message):
        if logger:
            logger(message)

    cmd = [str(part) for part in cmd]
    log(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        raise ToolFailed(f'{cmd[0]} not found on PATH')
    except subprocess.TimeoutExpired:
        raise ToolFailed(f'{cmd[0]} timed out after {timeout}s')

    if result.returncode != 0:
        stderr = (result.stderr or '').strip()
        if stderr:
            log(f'{cmd[0]} stderr: {stderr[-500:]}')
        raise ToolFailed(f'{cmd[0]} failed with code {result.returncode}')

    return result
