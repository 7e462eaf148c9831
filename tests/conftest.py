"""
Pytest configuration and shared fixtures for the nodemx test suite.

This module provides fake cgroup v1/v2 hierarchies, a fake procfs tree and
a Downward API directory under a temporary directory, together with
helpers that build a NodeContext over them.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Test Utilities
# ============================================================================


CGROUP_PATH = "user.slice/app.service"


def write_file(path: Path, content, mode: str = "w") -> Path:
    """Write ``content`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode) as f:
        f.write(content)
    return path


def make_stat_line(pid: int, comm: str, rss: int = 25, ppid: int = 1) -> str:
    """A /proc/<pid>/stat line with 52 fields."""
    values = ["0"] * 49
    values[0] = str(ppid)
    values[20] = str(rss)
    # rsslim is RLIM_INFINITY on most processes
    values[21] = "18446744073709551615"
    return f"{pid} ({comm}) S " + " ".join(values) + "\n"


PID_IO_CONTENT = (
    "rchar: 100\n"
    "wchar: 200\n"
    "syscr: 3\n"
    "syscw: 4\n"
    "read_bytes: 4096\n"
    "write_bytes: 8192\n"
    "cancelled_write_bytes: 0\n"
)

MEMINFO_CONTENT = (
    "MemTotal:       16384 kB\n"
    "MemFree:         8192 kB\n"
    "Buffers:          512 kB\n"
    "Cached:          2048 kB\n"
    "SwapCached:         0 kB\n"
    "Shmem:           1024 kB\n"
    "SwapTotal:       4096 kB\n"
    "SwapFree:        4096 kB\n"
    "HugePages_Total:    0\n"
)

DISKSTATS_CONTENT = (
    "   8       0 sda 100 5 2000 30 50 6 800 40 0 70 70\n"
    "   8       1 sda1 100 5 2000 30 50 6 800 40 0 70 70 1 2 3 4 5 6\n"
)

MOUNTINFO_CONTENT = (
    "36 35 98:0 /mnt1 /mnt2 rw,noatime master:1 - ext3 /dev/root rw,errors=continue\n"
    "22 1 0:21 / /proc rw,nosuid - proc proc rw\n"
)

NET_DEV_CONTENT = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|"
    "bytes    packets errs drop fifo colls carrier compressed\n"
    "    lo:    1000      10    0    0    0     0          0         0"
    "     1000      10    0    0    0     0       0          0\n"
    "  eth0:123456789012 20 0 0 0 0 0 1 5000 30 0 0 0 0 0 0\n"
)


def build_procfs(root: Path, pids: Optional[List[int]] = None) -> Path:
    """Populate a fake procfs below ``root``."""
    pids = pids if pids is not None else [100, 101]
    write_file(root / "stat", "cpu  100 20 30 400 5 0 0 0 0 0\ncpu0 50 10 15 200 2 0 0 0 0 0\n")
    write_file(root / "loadavg", "0.20 0.18 0.12 1/80 11206\n")
    write_file(root / "meminfo", MEMINFO_CONTENT)
    write_file(root / "diskstats", DISKSTATS_CONTENT)
    write_file(root / "sys" / "crypto" / "fips_enabled", "1\n")
    write_file(root / "self" / "stat", make_stat_line(os.getpid(), "pytest"))
    write_file(root / "self" / "mountinfo", MOUNTINFO_CONTENT)
    write_file(root / "self" / "net" / "dev", NET_DEV_CONTENT)

    for pid in pids:
        write_file(root / str(pid) / "stat", make_stat_line(pid, f"worker {pid}"))
        write_file(root / str(pid) / "io", PID_IO_CONTENT)
        write_file(root / str(pid) / "cmdline", b"postgres\0-D\0/data\0", mode="wb")

    ppid = os.getppid()
    write_file(root / str(ppid) / "task" / str(ppid) / "children",
               " ".join(str(pid) for pid in pids) + " \n")
    return root


def build_cgroup_v2(root: Path, procfs_root: Path) -> Path:
    """Populate a unified hierarchy with this process in CGROUP_PATH."""
    group = root / CGROUP_PATH
    write_file(group / "cgroup.controllers", "cpu io memory pids\n")
    write_file(group / "cgroup.procs", "12\n3\n12\n")
    write_file(group / "cgroup.threads", "")
    write_file(group / "memory.stat", "anon 1024\nfile 2048\nkernel_stack 16384\n")
    write_file(group / "memory.max", "max\n")
    write_file(group / "memory.current", "4096\n")
    write_file(group / "memory.pressure",
               "some avg10=0.00 avg60=0.50 avg300=1.25 total=12345\n"
               "full avg10=0.00 avg60=0.00 avg300=0.00 total=0\n")
    write_file(group / "cpu.max", "max 100000\n")
    write_file(group / "cpu.weight", "100\n")
    write_file(group / "io.stat", "8:0 rbytes=1024 wbytes=2048 rios=1 wios=2 dbytes=0 dios=0\n")
    write_file(group / "pids.current", "3\n")
    write_file(root / "cgroup.controllers", "cpu io memory pids\n")
    write_file(procfs_root / "self" / "cgroup", f"0::/{CGROUP_PATH}\n")
    return root


def build_cgroup_v1(root: Path, procfs_root: Path) -> Path:
    """Populate a legacy hierarchy with co-mounted cpu,cpuacct and a named systemd hierarchy."""
    memory = root / "memory" / CGROUP_PATH
    write_file(memory / "cgroup.procs", "42\n43\n")
    write_file(memory / "memory.usage_in_bytes", "8192\n")
    write_file(memory / "memory.stat", "cache 0\nrss 4096\n")
    cpu = root / "cpu,cpuacct" / CGROUP_PATH
    write_file(cpu / "cpuacct.usage", "123456\n")
    write_file(cpu / "cpu.cfs_quota_us", "-1\n")
    write_file(cpu / "cpuacct.stat", "user 10\nsystem 20\n")
    blkio = root / "blkio" / CGROUP_PATH
    write_file(blkio / "blkio.throttle.io_serviced",
               "8:0 Read 10\n8:0 Write 20\n8:0 Total 30\nTotal 30\n")
    (root / "systemd" / CGROUP_PATH).mkdir(parents=True, exist_ok=True)
    write_file(procfs_root / "self" / "cgroup",
               f"12:memory:/{CGROUP_PATH}\n"
               f"11:cpu,cpuacct:/{CGROUP_PATH}\n"
               f"10:blkio:/{CGROUP_PATH}\n"
               f"1:name=systemd:/{CGROUP_PATH}\n"
               f"0::/{CGROUP_PATH}\n")
    return root


def build_kdapi(root: Path) -> Path:
    write_file(root / "labels",
               'app="web"\n'
               'escaped="a\\"b\\\\c"\n'
               'tier="back\\u00e9nd"\n')
    write_file(root / "mem_limit", "1073741824\n")
    return root


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def node_roots(temp_dir) -> Dict[str, Path]:
    """Empty cgroup root plus populated procfs and Downward API roots."""
    roots = {
        "cgroup": temp_dir / "cgroup",
        "proc": build_procfs(temp_dir / "proc"),
        "kdapi": build_kdapi(temp_dir / "podinfo"),
    }
    roots["cgroup"].mkdir()
    return roots


@pytest.fixture
def cgroup_v2(node_roots):
    build_cgroup_v2(node_roots["cgroup"], node_roots["proc"])
    return node_roots


@pytest.fixture
def cgroup_v1(node_roots):
    build_cgroup_v1(node_roots["cgroup"], node_roots["proc"])
    return node_roots


def make_config(roots: Dict[str, Path], **overrides):
    """NodemxConfig pointing at the fake roots."""
    from nodemx.models.config import NodemxConfig

    settings = {
        "cgroup_root": str(roots["cgroup"]),
        "kdapi_path": str(roots["kdapi"]),
        "procfs_root": str(roots["proc"]),
    }
    settings.update(overrides)
    return NodemxConfig(**settings)


def unified_mounts(roots: Dict[str, Path]) -> Dict[str, str]:
    return {str(roots["cgroup"]): "cgroup2"}


def legacy_mounts(roots: Dict[str, Path]) -> Dict[str, str]:
    return {str(roots["cgroup"]): "tmpfs"}


def hybrid_mounts(roots: Dict[str, Path]) -> Dict[str, str]:
    return {str(roots["cgroup"]): "tmpfs", str(roots["cgroup"] / "unified"): "cgroup2"}


class TestUtils:
    """Utility functions for testing."""

    write_file = staticmethod(write_file)
    make_stat_line = staticmethod(make_stat_line)
    build_procfs = staticmethod(build_procfs)
    build_cgroup_v1 = staticmethod(build_cgroup_v1)
    build_cgroup_v2 = staticmethod(build_cgroup_v2)
    make_config = staticmethod(make_config)
    unified_mounts = staticmethod(unified_mounts)
    legacy_mounts = staticmethod(legacy_mounts)
    hybrid_mounts = staticmethod(hybrid_mounts)
    cgroup_path = CGROUP_PATH


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture
def v2_context(cgroup_v2):
    """NodeContext over the unified hierarchy."""
    from nodemx.context import build_context

    return build_context(make_config(cgroup_v2), mounts=unified_mounts(cgroup_v2))


@pytest.fixture
def v1_context(cgroup_v1):
    """NodeContext over the legacy hierarchy."""
    from nodemx.context import build_context

    return build_context(make_config(cgroup_v1), mounts=legacy_mounts(cgroup_v1))


@pytest.fixture
def disabled_context(temp_dir):
    """NodeContext whose every root is missing."""
    from nodemx.context import build_context

    missing = {
        "cgroup": temp_dir / "no-cgroup",
        "proc": temp_dir / "no-proc",
        "kdapi": temp_dir / "no-podinfo",
    }
    return build_context(make_config(missing), mounts={})


@pytest.fixture
def config_file(temp_dir, node_roots):
    """Write a config.toml for the fake roots and return its path."""
    import toml

    config_path = temp_dir / "config.toml"
    with open(config_path, "w") as f:
        toml.dump(
            {
                "nodemx": {
                    "cgroup_root": str(node_roots["cgroup"]),
                    "kdapi_path": str(node_roots["kdapi"]),
                    "procfs_root": str(node_roots["proc"]),
                }
            },
            f,
        )
    return config_path


@pytest.fixture(autouse=True)
def clear_state_after_test():
    """Automatically clear the configuration cache and context after each test."""
    yield  # Run the test

    from nodemx.config import clear_config_cache, set_config_path
    from nodemx.context import set_context

    clear_config_cache()
    set_context(None)

    # Always reset to original config path
    set_config_path(Path(__file__).parent.parent / "conf" / "config.toml")
