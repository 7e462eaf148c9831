"""
Process-wide node context.

The context bundles everything the query functions need to know about the
node: the configuration, the resolved cgroup mode, whether the process is
containerized, the controller path table and which subsystems are usable.
It is built in one explicit step and never mutated afterwards; a new
context is only produced by ``reload_context``.

Subsystem failures found while building the context do not propagate:
they are logged and the subsystem is marked disabled, so that queries
against it return empty results instead of failing.
"""

import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .config import clear_config_cache, get_config
from .models.cgroup import CgroupMode, CgroupPathTable
from .models.config import NodemxConfig
from .system.cgroup import build_path_table, detect_cgroup_mode, detect_containerized
from .system.procfs import procfs_available
from .validation import ErrorSeverity, NodemxError, handle_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeContext:
    """
    Immutable snapshot of the node's resolved topology.

    Attributes:
        config: Settings the context was built from
        cgroup_mode: Effective mode; DISABLED when cgroup queries must degrade
        detected_mode: Mode found on the system before any degradation
        containerized: Whether cgroup paths are taken relative to the root
        path_table: Controller to directory mapping for this process
        kdapi_enabled: Downward API queries read files
        procfs_enabled: procfs queries read files
    """

    config: NodemxConfig = field(default_factory=NodemxConfig)
    cgroup_mode: CgroupMode = CgroupMode.UNINITIALIZED
    detected_mode: CgroupMode = CgroupMode.UNINITIALIZED
    containerized: bool = False
    path_table: CgroupPathTable = field(default_factory=CgroupPathTable)
    kdapi_enabled: bool = False
    procfs_enabled: bool = False

    @property
    def cgroupfs_enabled(self) -> bool:
        return self.cgroup_mode in (CgroupMode.LEGACY, CgroupMode.UNIFIED)

    @property
    def proc_cgroup_file(self) -> str:
        return proc_cgroup_file(self.config)


def proc_cgroup_file(config: NodemxConfig) -> str:
    return posixpath.join(config.procfs_root, "self", "cgroup")


def _resolve_cgroups(config: NodemxConfig, mounts: Optional[Mapping[str, str]]):
    """Return (effective mode, detected mode, containerized, path table)."""
    if not config.cgroupfs_enabled:
        logger.info("cgroup virtual file system access disabled by configuration")
        return CgroupMode.DISABLED, CgroupMode.DISABLED, False, CgroupPathTable()

    detected = CgroupMode.DISABLED
    try:
        detected = detect_cgroup_mode(config.cgroup_root, mounts)
        if detected == CgroupMode.DISABLED:
            return detected, detected, False, CgroupPathTable()
        containerized = detect_containerized(
            detected, config.cgroup_root, proc_cgroup_file(config), config.containerized
        )
        path_table = build_path_table(
            detected, config.cgroup_root, containerized, proc_cgroup_file(config)
        )
    except NodemxError as e:
        handle_error(
            error=e,
            context="resolving cgroup topology, disabling cgroup virtual file system access",
            severity=ErrorSeverity.WARNING,
            reraise=False,
            logger=logger,
        )
        return CgroupMode.DISABLED, detected, False, CgroupPathTable()

    return detected, detected, containerized, path_table


def build_context(config: Optional[NodemxConfig] = None,
                  mounts: Optional[Mapping[str, str]] = None) -> NodeContext:
    """
    Resolve the node's topology into a new NodeContext.

    Args:
        config: Settings to use; the loaded configuration when omitted
        mounts: {mountpoint: fstype} used for cgroup mode detection; read from
            the system when omitted

    Returns:
        Fully built, immutable NodeContext
    """
    if config is None:
        config = get_config()

    mode, detected, containerized, path_table = _resolve_cgroups(config, mounts)

    kdapi_enabled = config.kdapi_enabled
    if kdapi_enabled and not os.path.isdir(config.kdapi_path):
        logger.warning(f"Downward API path {config.kdapi_path} is not a directory, "
                       f"disabling Downward API access")
        kdapi_enabled = False

    procfs_enabled = config.procfs_enabled
    if procfs_enabled and not procfs_available(config.procfs_root):
        logger.warning(f"procfs not found at {config.procfs_root}, disabling procfs access")
        procfs_enabled = False

    context = NodeContext(
        config=config,
        cgroup_mode=mode,
        detected_mode=detected,
        containerized=containerized,
        path_table=path_table,
        kdapi_enabled=kdapi_enabled,
        procfs_enabled=procfs_enabled,
    )
    logger.info(
        f"Node context built: cgroup mode={mode.value} (detected {detected.value}), "
        f"containerized={containerized}, controllers={len(path_table)}, "
        f"kdapi={kdapi_enabled}, procfs={procfs_enabled}"
    )
    return context


# --- Global Singleton for the Context ---

_CONTEXT: Optional[NodeContext] = None


def get_context() -> NodeContext:
    """
    Return the process-wide context, building it on first use.

    The context is assigned only once it is complete, so readers never see
    a partially built one.
    """
    global _CONTEXT
    if _CONTEXT is None:
        _CONTEXT = build_context()
    return _CONTEXT


def reload_context(config: Optional[NodemxConfig] = None) -> NodeContext:
    """
    Re-read the configuration (unless ``config`` is given), resolve the
    topology again and publish the new context.
    """
    global _CONTEXT
    if config is None:
        clear_config_cache()
    _CONTEXT = build_context(config)
    return _CONTEXT


def set_context(context: Optional[NodeContext]) -> None:
    """Publish ``context`` as the process-wide context; None forgets it."""
    global _CONTEXT
    _CONTEXT = context
