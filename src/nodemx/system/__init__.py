"""
System interaction for the nodemx package.

This module provides the parts that touch the running system:

- Scoped reads of kernel virtual files with errors classified by kind
- Cgroup mode detection, containerization detection and the per-controller
  path table for this process
- Process discovery, process ownership and filesystem statistics from procfs
  and the mount table
"""

# Virtual file reads
from .vfs import read_nlsv, read_one_nlsv, read_vfs

# Cgroup topology
from .cgroup import (
    build_path_table,
    cgroup_members,
    controller_of,
    detect_cgroup_mode,
    detect_containerized,
    fq_cgroup_path,
    read_mount_table,
)

# procfs and filesystems
from .procfs import (
    child_pids,
    filesystem_stats,
    page_size,
    procfs_available,
    process_owner,
    read_cmdline,
)

__all__ = [
    # Virtual file reads
    "read_nlsv",
    "read_one_nlsv",
    "read_vfs",
    # Cgroup topology
    "build_path_table",
    "cgroup_members",
    "controller_of",
    "detect_cgroup_mode",
    "detect_containerized",
    "fq_cgroup_path",
    "read_mount_table",
    # procfs and filesystems
    "child_pids",
    "filesystem_stats",
    "page_size",
    "procfs_available",
    "process_owner",
    "read_cmdline",
]
