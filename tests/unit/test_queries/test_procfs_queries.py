"""
Unit tests for the procfs query functions.
"""

import os
import ssl

import pytest

import nodemx
from nodemx.queries import (
    fips_mode,
    fsinfo,
    kpages_to_bytes,
    nodemx_version,
    openssl_version,
    proc_cputime,
    proc_diskstats,
    proc_loadavg,
    proc_meminfo,
    proc_mountinfo,
    proc_network_stats,
    proc_pid_cmdline,
    proc_pid_io,
    proc_pid_stat,
)
from nodemx.validation import MalformedDataError, VirtualFileNotFoundError


@pytest.mark.unit
class TestSystemWideQueries:
    """Test cases for the system-wide procfs files."""

    def test_diskstats(self, v2_context):
        table = proc_diskstats(v2_context)

        assert table.column("device_name") == ["sda", "sda1"]
        assert table.column("discards_merged") == [None, 2]
        assert table.column("time_spent_flushing") == [None, 6]

    def test_mountinfo(self, v2_context):
        table = proc_mountinfo(v2_context)
        assert table.column("fs_type") == ["ext3", "proc"]
        assert table.column("major_number") == [98, 0]

    def test_meminfo(self, v2_context):
        meminfo = dict(proc_meminfo(v2_context).rows())
        assert meminfo["MemTotal"] == 16384 * 1024
        assert meminfo["HugePages_Total"] == 0

    def test_network_stats(self, v2_context):
        table = proc_network_stats(v2_context)
        assert table.column("interface") == ["lo", "eth0"]
        assert table.column("rx_bytes") == [1000, 123456789012]

    def test_cputime_and_loadavg(self, v2_context):
        assert proc_cputime(v2_context).rows() == [(100, 20, 30, 400, 5)]
        assert proc_loadavg(v2_context).rows() == [(0.2, 0.18, 0.12, 11206)]

    def test_fips_mode(self, v2_context, node_roots):
        assert fips_mode(v2_context) is True

        os.remove(node_roots["proc"] / "sys" / "crypto" / "fips_enabled")
        assert fips_mode(v2_context) is False

    def test_fsinfo(self, v2_context, temp_dir):
        table = fsinfo(v2_context, str(temp_dir))

        assert len(table) == 1
        assert table.column("block_size")[0] > 0

    def test_fsinfo_missing_path(self, v2_context, temp_dir):
        with pytest.raises(VirtualFileNotFoundError):
            fsinfo(v2_context, str(temp_dir / "absent"))


@pytest.mark.unit
class TestPerProcessQueries:
    """Test cases for the per-process procfs files."""

    def test_pid_stat_defaults_to_siblings(self, v2_context):
        table = proc_pid_stat(v2_context)

        assert table.column("pid") == [100, 101]
        assert table.column("comm") == ["worker 100", "worker 101"]

    def test_pid_stat_explicit_pids(self, v2_context):
        assert proc_pid_stat(v2_context, pids=[101]).column("pid") == [101]

    def test_pid_io(self, v2_context):
        table = proc_pid_io(v2_context, pids=[100])
        assert table.rows() == [(100, 100, 200, 3, 4, 4096, 8192, 0)]

    def test_pid_cmdline(self, v2_context):
        row = proc_pid_cmdline(v2_context, pids=[100]).to_dicts()[0]

        assert row["fullcomm"] == "postgres -D /data"
        assert row["uid"] == os.getuid()

    def test_missing_process(self, v2_context):
        with pytest.raises(VirtualFileNotFoundError):
            proc_pid_stat(v2_context, pids=[99999])

    def test_no_processes(self, v2_context):
        with pytest.raises(MalformedDataError):
            proc_pid_io(v2_context, pids=[])


@pytest.mark.unit
class TestProcfsDisabled:
    """Test cases with procfs access disabled."""

    def test_tables_are_empty(self, disabled_context):
        assert len(proc_diskstats(disabled_context)) == 0
        assert len(proc_meminfo(disabled_context)) == 0
        assert len(proc_pid_stat(disabled_context)) == 0
        assert len(fsinfo(disabled_context, "/")) == 0

    def test_fips_is_null(self, disabled_context):
        assert fips_mode(disabled_context) is None


@pytest.mark.unit
class TestContextFreeQueries:
    """Test cases for queries that need no context."""

    def test_kpages_to_bytes(self):
        assert kpages_to_bytes(2) == 2 * os.sysconf("SC_PAGE_SIZE")
        assert kpages_to_bytes("3") == 3 * os.sysconf("SC_PAGE_SIZE")
        with pytest.raises(MalformedDataError):
            kpages_to_bytes("-1")

    def test_versions(self):
        assert nodemx_version() == nodemx.__version__
        assert openssl_version() == ssl.OPENSSL_VERSION
