"""
Cgroup topology resolution.

Works out which cgroup hierarchy the host uses, whether this process sees
the hierarchy from inside a container, and where each controller's files
for this process live. The results feed the immutable NodeContext.

Mode detection follows https://systemd.io/CGROUP_DELEGATION/: a cgroup2
mount at the root means unified mode, a tmpfs at the root means legacy
mode unless ``<root>/unified`` is a cgroup2 mount, which means hybrid mode.
The filesystem types come from the mount table rather than statfs magic
numbers.
"""

import logging
import os
import posixpath
from typing import Dict, List, Mapping, Optional, Tuple

import psutil

from ..models.cgroup import DEFAULT_CONTROLLER, UNIFIED_CONTROLLER, CgroupMode, CgroupPathTable
from ..parsing.coercion import to_int64
from ..parsing.tokenizers import split_tokens
from ..validation import (
    MalformedDataError,
    UnsupportedModeError,
    join_under_root,
    validate_relative_filename,
)
from .vfs import read_nlsv

logger = logging.getLogger(__name__)

CGROUP2_FSTYPE = "cgroup2"
TMPFS_FSTYPE = "tmpfs"
HYBRID_UNIFIED_DIR = "unified"
PROCS_FILE = "cgroup.procs"
CONTROLLERS_FILE = "cgroup.controllers"
# the legacy controller whose path decides containerization and the default entry
REFERENCE_CONTROLLER = "memory"
UNIFIED_LINE_PREFIX = "0::/"


def read_mount_table() -> Dict[str, str]:
    """Return {mountpoint: fstype} for every mounted filesystem."""
    return {part.mountpoint: part.fstype for part in psutil.disk_partitions(all=True)}


def _join(root: str, *parts: str) -> str:
    """Join path segments the way the kernel reports them, leading slashes included."""
    segments = [root.rstrip("/") or "/"] + [p.strip("/") for p in parts if p.strip("/")]
    return posixpath.normpath("/".join(segments))


def detect_cgroup_mode(cgroup_root: str, mounts: Optional[Mapping[str, str]] = None) -> CgroupMode:
    """
    Determine the cgroup hierarchy layout below ``cgroup_root``.

    Args:
        cgroup_root: Directory where the cgroup hierarchy is mounted
        mounts: {mountpoint: fstype}; read from the system when omitted

    Returns:
        UNIFIED, LEGACY or HYBRID, or DISABLED when the root cannot be examined

    Raises:
        UnsupportedModeError: If the root is mounted with an unexpected filesystem type
    """
    root = posixpath.normpath(cgroup_root)
    if not os.path.isdir(root):
        logger.warning(f"cgroup root {root} is not an accessible directory, "
                       f"disabling cgroup virtual file system access")
        return CgroupMode.DISABLED

    if mounts is None:
        try:
            mounts = read_mount_table()
        except OSError as e:
            logger.warning(f"could not read mount table for cgroup root {root}: {e}, "
                           f"disabling cgroup virtual file system access")
            return CgroupMode.DISABLED

    fstype = mounts.get(root)
    if fstype == CGROUP2_FSTYPE:
        return CgroupMode.UNIFIED
    if fstype == TMPFS_FSTYPE:
        if mounts.get(_join(root, HYBRID_UNIFIED_DIR)) == CGROUP2_FSTYPE:
            return CgroupMode.HYBRID
        return CgroupMode.LEGACY

    raise UnsupportedModeError(f"unexpected mount type {fstype} on cgroup root {root}", path=root)


def _split_legacy_line(line: str, source: str, line_number: int) -> Tuple[str, str]:
    """
    Split ``<id>:<controller list>:<path>`` into (controller list, path).

    ``name=systemd`` style named hierarchies map to the directory ``systemd``.
    """
    fields = line.split(":", 2)
    if len(fields) != 3:
        raise MalformedDataError(
            f"malformed cgroup path found in file {source}, line {line_number}",
            path=source, line_number=line_number,
        )
    controller = fields[1]
    if "=" in controller:
        controller = controller.split("=", 1)[1]
    return controller, fields[2]


def detect_containerized(
    mode: CgroupMode,
    cgroup_root: str,
    proc_cgroup_file: str,
    override: Optional[bool] = None,
) -> bool:
    """
    Decide whether this process sees its cgroup hierarchy from a container.

    The path listed for this process in /proc/self/cgroup exists under the
    cgroup root on a host; inside a container the hierarchy is mounted at
    the process's own cgroup and the listed path does not exist.

    Args:
        mode: Resolved cgroup mode
        cgroup_root: Directory where the cgroup hierarchy is mounted
        proc_cgroup_file: Path of /proc/self/cgroup
        override: Explicit setting, wins over the heuristic when not None

    Raises:
        MalformedDataError: If /proc/self/cgroup is empty or malformed
    """
    if override is not None:
        logger.debug(f"containerized explicitly set to {override}")
        return override

    if mode == CgroupMode.LEGACY:
        lines = read_nlsv(proc_cgroup_file)
        if not lines:
            raise MalformedDataError(
                f"no cgroup paths found in file {proc_cgroup_file}", path=proc_cgroup_file
            )
        probe = None
        for number, line in enumerate(lines, start=1):
            controller, path = _split_legacy_line(line, proc_cgroup_file, number)
            if controller.startswith(REFERENCE_CONTROLLER):
                probe = _join(cgroup_root, controller, path)
                break
        return probe is None or not os.path.exists(probe)

    if mode == CgroupMode.UNIFIED:
        lines = read_nlsv(proc_cgroup_file)
        if len(lines) != 1:
            raise MalformedDataError(
                f"expected 1, got {len(lines)}, lines from file {proc_cgroup_file}",
                path=proc_cgroup_file, expected=1, actual=len(lines),
            )
        probe = _join(cgroup_root, lines[0][len(UNIFIED_LINE_PREFIX):])
        return not os.path.exists(probe)

    return False


def _legacy_entries(cgroup_root: str, containerized: bool,
                    proc_cgroup_file: str) -> List[Tuple[str, str]]:
    lines = read_nlsv(proc_cgroup_file)
    if not lines:
        raise MalformedDataError(
            f"no cgroup paths found in file {proc_cgroup_file}", path=proc_cgroup_file
        )

    entries: List[Tuple[str, str]] = []
    default_path = None
    for number, line in enumerate(lines, start=1):
        controller, path = _split_legacy_line(line, proc_cgroup_file, number)
        # the cgroup2 line of a legacy host has no controller directory
        if not controller:
            continue
        if containerized:
            directory = _join(cgroup_root, controller)
        else:
            directory = _join(cgroup_root, controller, path)
        entries.append((controller, directory))
        # co-mounted controllers ("cpu,cpuacct") are reachable by each name
        if "," in controller:
            entries.extend((member, directory) for member in controller.split(",") if member)
        if controller == REFERENCE_CONTROLLER:
            default_path = directory

    if default_path is None:
        if not entries:
            raise MalformedDataError(
                f"no cgroup paths found in file {proc_cgroup_file}", path=proc_cgroup_file
            )
        default_path = entries[0][1]
        logger.warning(f"no {REFERENCE_CONTROLLER} controller in {proc_cgroup_file}, "
                       f"using {default_path} as the default cgroup path")

    entries.append((DEFAULT_CONTROLLER, default_path))
    return entries


def _unified_entries(cgroup_root: str, containerized: bool,
                     proc_cgroup_file: str) -> List[Tuple[str, str]]:
    if containerized:
        default_path = posixpath.normpath(cgroup_root)
    else:
        lines = read_nlsv(proc_cgroup_file)
        if len(lines) != 1:
            raise MalformedDataError(
                f"expected 1, got {len(lines)}, lines from file {proc_cgroup_file}",
                path=proc_cgroup_file, expected=1, actual=len(lines),
            )
        default_path = _join(cgroup_root, lines[0][len(UNIFIED_LINE_PREFIX):])

    controllers: List[str] = []
    for line in read_nlsv(_join(default_path, CONTROLLERS_FILE)):
        controllers.extend(split_tokens(line))

    entries = [(controller, default_path) for controller in controllers]
    entries.append((DEFAULT_CONTROLLER, default_path))
    entries.append((UNIFIED_CONTROLLER, default_path))
    return entries


def build_path_table(
    mode: CgroupMode,
    cgroup_root: str,
    containerized: bool,
    proc_cgroup_file: str,
) -> CgroupPathTable:
    """
    Compute the controller to directory table for this process.

    Legacy mode lists every controller named in /proc/self/cgroup; unified
    mode repeats the single cgroup directory for every controller enabled
    in its cgroup.controllers, plus the ``""`` entry. Both publish the
    ``cgroup`` entry used for cgroup.procs.

    Raises:
        UnsupportedModeError: In hybrid mode
        MalformedDataError: If /proc/self/cgroup cannot be interpreted
        VirtualFileNotFoundError: If a file the resolver needs is missing
    """
    if mode == CgroupMode.LEGACY:
        entries = _legacy_entries(cgroup_root, containerized, proc_cgroup_file)
    elif mode == CgroupMode.UNIFIED:
        entries = _unified_entries(cgroup_root, containerized, proc_cgroup_file)
    elif mode == CgroupMode.HYBRID:
        raise UnsupportedModeError(
            f"unsupported cgroup configuration: hybrid hierarchy at {cgroup_root}",
            path=cgroup_root,
        )
    else:
        return CgroupPathTable()

    # later duplicates of a controller name do not replace the first
    seen = set()
    unique = []
    for controller, directory in entries:
        if controller not in seen:
            seen.add(controller)
            unique.append((controller, directory))
    return CgroupPathTable(tuple(unique))


def controller_of(filename: str) -> str:
    """
    Controller owning a cgroup interface file: the name up to the first ``.``.

    Raises:
        MalformedDataError: If the filename has no ``.``
    """
    controller, sep, _ = filename.partition(".")
    if not sep:
        raise MalformedDataError(f'missing "." in filename {filename}', path=filename)
    return controller


def fq_cgroup_path(path_table: CgroupPathTable, filename: str) -> str:
    """
    Absolute path of a caller-supplied cgroup interface file.

    Examples:
        ``memory.stat`` resolves below the ``memory`` controller's directory.

    Raises:
        AccessDeniedError: If the filename is absolute or references ".."
        MalformedDataError: If the filename has no controller prefix
        VirtualFileNotFoundError: If the controller is not active for this process
    """
    filename = validate_relative_filename(filename)
    controller = controller_of(filename)
    return join_under_root(path_table.lookup(controller), filename)


def cgroup_members(path_table: CgroupPathTable) -> List[int]:
    """
    Distinct pids in this process's cgroup, in ascending order.

    Raises:
        MalformedDataError: If cgroup.procs holds a non-integer line
    """
    procs_file = _join(path_table.lookup(DEFAULT_CONTROLLER), PROCS_FILE)
    pids = set()
    for number, line in enumerate(read_nlsv(procs_file), start=1):
        try:
            pids.add(to_int64(line))
        except MalformedDataError:
            raise MalformedDataError(
                f'contents not an integer, file "{procs_file}", line {number}',
                path=procs_file, line_number=number,
            )
    return sorted(pids)

