"""
Reading kernel virtual files.

Files under /proc and /sys/fs/cgroup report a size of zero or one page, so
they are read to EOF in a single scoped ``open`` rather than trusting
``stat``. Every read is fresh; nothing is cached between calls.
"""

import logging
from typing import List

from ..parsing.tokenizers import split_lines
from ..validation import (
    AccessDeniedError,
    IOFailureError,
    MalformedDataError,
    VirtualFileNotFoundError,
)

logger = logging.getLogger(__name__)


def read_vfs(path: str) -> bytes:
    """
    Read the complete content of a virtual file.

    Args:
        path: Absolute path of the file

    Returns:
        Raw file content

    Raises:
        VirtualFileNotFoundError: If the file does not exist
        AccessDeniedError: If the process may not read the file
        IOFailureError: On any other read failure
    """
    try:
        with open(path, "rb") as f:
            content = f.read()
    except FileNotFoundError as e:
        raise VirtualFileNotFoundError(f"could not open file {path}: {e.strerror}", path=path)
    except PermissionError as e:
        raise AccessDeniedError(f"could not open file {path}: {e.strerror}", path=path)
    except OSError as e:
        raise IOFailureError(f"could not read file {path}: {e}", path=path)
    except ValueError as e:
        raise IOFailureError(f"could not read file {path!r}: {e}", path=path)

    logger.debug(f"Read {len(content)} bytes from {path}")
    return content


def read_nlsv(path: str) -> List[str]:
    """Read a newline separated file and return its non-empty lines."""
    return split_lines(read_vfs(path), path)


def read_one_nlsv(path: str) -> str:
    """
    Read a file that must contain exactly one line.

    Raises:
        MalformedDataError: If the file holds zero or several lines
    """
    lines = read_nlsv(path)
    if len(lines) != 1:
        raise MalformedDataError(
            f"expected 1, got {len(lines)}, lines from file {path}",
            path=path, expected=1, actual=len(lines),
        )
    return lines[0]
