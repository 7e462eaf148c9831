"""
procfs and filesystem helpers that are not plain line parsing.

Process discovery, process ownership and filesystem statistics need
system calls next to the file reads; they are kept here so the parsers
stay pure.
"""

import logging
import os
import posixpath
import pwd
from typing import List, Optional, Tuple

import psutil

from ..parsing.coercion import to_int64
from ..parsing.tokenizers import split_tokens
from ..validation import IOFailureError, MalformedDataError, VirtualFileNotFoundError
from .vfs import read_nlsv, read_vfs

logger = logging.getLogger(__name__)


def procfs_available(procfs_root: str) -> bool:
    """True when ``procfs_root`` looks like a mounted procfs."""
    return os.path.isfile(posixpath.join(procfs_root, "self", "stat")) or \
        os.path.isfile(posixpath.join(procfs_root, "stat"))


def children_file(procfs_root: str, ppid: int) -> str:
    return posixpath.join(procfs_root, str(ppid), "task", str(ppid), "children")


def child_pids(procfs_root: str, ppid: Optional[int] = None) -> List[int]:
    """
    Pids of the direct children of ``ppid`` (default: this process's parent).

    Raises:
        MalformedDataError: If the children file holds a non-integer token
    """
    if ppid is None:
        ppid = os.getppid()
    source = children_file(procfs_root, ppid)
    pids: List[int] = []
    for line in read_nlsv(source):
        for token in split_tokens(line):
            try:
                pids.append(to_int64(token))
            except MalformedDataError:
                raise MalformedDataError(f'contents not an integer, file "{source}"', path=source)
    logger.debug(f"Found {len(pids)} children of pid {ppid}")
    return pids


def pid_file(procfs_root: str, pid: int, name: str) -> str:
    return posixpath.join(procfs_root, str(pid), name)


def read_cmdline(procfs_root: str, pid: int) -> str:
    """Full command line of ``pid`` with NUL argument separators turned into spaces."""
    raw = read_vfs(pid_file(procfs_root, pid, "cmdline"))
    return raw.replace(b"\0", b" ").decode("utf-8", errors="replace").strip()


def process_owner(procfs_root: str, pid: int) -> Tuple[int, Optional[str]]:
    """
    (uid, username) of the owner of ``pid``; username is None for unknown uids.

    Raises:
        VirtualFileNotFoundError: If the process directory does not exist
    """
    path = posixpath.join(procfs_root, str(pid))
    try:
        uid = os.stat(path).st_uid
    except FileNotFoundError:
        raise VirtualFileNotFoundError(f"'{path}' not found", path=path)
    except OSError as e:
        raise IOFailureError(f"could not stat {path}: {e}", path=path)
    try:
        username = pwd.getpwuid(uid).pw_name
    except KeyError:
        username = None
    return uid, username


def read_mount_options(mounts: Optional[List] = None) -> List[Tuple[str, str, str]]:
    """Return (mountpoint, fstype, opts) for every mounted filesystem."""
    if mounts is None:
        mounts = psutil.disk_partitions(all=True)
    return [(part.mountpoint, part.fstype, part.opts) for part in mounts]


def _containing_mount(path: str, mounts: List[Tuple[str, str, str]]) -> Optional[Tuple[str, str, str]]:
    """The mount entry with the longest mountpoint that is a prefix of ``path``."""
    best = None
    for entry in mounts:
        mountpoint = entry[0]
        prefix = mountpoint.rstrip("/") + "/"
        if path == mountpoint or path.startswith(prefix) or mountpoint == "/":
            if best is None or len(mountpoint) > len(best[0]):
                best = entry
    return best


def filesystem_stats(path: str, mounts: Optional[List[Tuple[str, str, str]]] = None) -> List[str]:
    """
    Statistics of the filesystem holding ``path`` as one row of string tokens.

    Columns: major, minor, type, block size, blocks, total bytes, free
    blocks, free bytes, available blocks, available bytes, total inodes,
    free inodes, mount options.

    Raises:
        VirtualFileNotFoundError: If ``path`` does not exist
        IOFailureError: If the filesystem cannot be queried
    """
    try:
        st = os.stat(path)
        vfs = os.statvfs(path)
    except FileNotFoundError:
        raise VirtualFileNotFoundError(f"could not stat {path}: no such file or directory", path=path)
    except OSError as e:
        raise IOFailureError(f"could not stat {path}: {e}", path=path)
    except ValueError as e:
        raise IOFailureError(f"could not stat {path!r}: {e}", path=path)

    if mounts is None:
        mounts = read_mount_options()
    entry = _containing_mount(posixpath.realpath(path), mounts)
    fstype, opts = (entry[1], entry[2]) if entry else ("unknown", "")

    block_size = vfs.f_bsize
    return [
        str(os.major(st.st_dev)),
        str(os.minor(st.st_dev)),
        fstype,
        str(block_size),
        str(vfs.f_blocks),
        str(vfs.f_blocks * block_size),
        str(vfs.f_bfree),
        str(vfs.f_bfree * block_size),
        str(vfs.f_bavail),
        str(vfs.f_bavail * block_size),
        str(vfs.f_files),
        str(vfs.f_ffree),
        opts,
    ]


def page_size() -> int:
    return os.sysconf("SC_PAGE_SIZE")

