"""Pick the log file to follow out of a log directory."""

import logging
import os

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".log"


def find_latest_log(directory: str) -> str:
    """Return the path of the most recently modified ``.log`` file.

    Raises FileNotFoundError if the directory cannot be read or holds no
    log files.
    """
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        raise FileNotFoundError(f"Cannot read log directory {directory}: {e}") from e

    latest_path = None
    latest_mtime = None
    for entry in entries:
        if not entry.name.endswith(LOG_SUFFIX):
            continue
        try:
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
        except OSError:
            continue
        if latest_mtime is None or mtime > latest_mtime:
            latest_path = entry.path
            latest_mtime = mtime

    if latest_path is None:
        raise FileNotFoundError(f"No {LOG_SUFFIX} files found in {directory}")

    logger.info("Using most recent log file: %s", latest_path)
    return latest_path
