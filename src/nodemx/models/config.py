"""
Configuration data model.

This module contains the settings consumed by the context builder: the
enable flags for each subsystem, the containerization override and the
root directories the virtual files live under.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_CGROUP_ROOT = "/sys/fs/cgroup"
DEFAULT_KDAPI_PATH = "/etc/podinfo"
DEFAULT_PROCFS_ROOT = "/proc"


@dataclass(frozen=True)
class NodemxConfig:
    """
    Settings loaded from the ``[nodemx]`` section of ``config.toml``.
    """

    # [nodemx] cgroup virtual file system access
    cgroupfs_enabled: bool = True
    cgroup_root: str = DEFAULT_CGROUP_ROOT
    # None means "detect"; an explicit value overrides the heuristic
    containerized: Optional[bool] = None

    # [nodemx] Kubernetes Downward API projection
    kdapi_enabled: bool = True
    kdapi_path: str = DEFAULT_KDAPI_PATH

    # [nodemx] procfs access
    procfs_enabled: bool = True
    procfs_root: str = DEFAULT_PROCFS_ROOT
