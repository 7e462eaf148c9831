"""
Output signatures for every query.

Column names follow the kernel documentation for each file (see
Documentation/admin-guide/iostats.rst, proc.rst and cgroup-v2.rst).
"""

from .table import ColumnType, Signature

_T = ColumnType.TEXT
_I = ColumnType.INTEGER
_B = ColumnType.BIGINT
_N = ColumnType.NUMERIC
_F = ColumnType.FLOAT8

TEXT_SIG = Signature.of(("val", _T))
BIGINT_SIG = Signature.of(("val", _B))
FLOAT8_SIG = Signature.of(("val", _F))
TEXT_ARRAY_SIG = Signature.of(("val", ColumnType.TEXT_ARRAY))
BIGINT_ARRAY_SIG = Signature.of(("val", ColumnType.BIGINT_ARRAY))

TEXT_TEXT_SIG = Signature.of(("key", _T), ("val", _T))
TEXT_BIGINT_SIG = Signature.of(("key", _T), ("val", _B))
TEXT_TEXT_BIGINT_SIG = Signature.of(("key", _T), ("subkey", _T), ("val", _B))
TEXT_TEXT_FLOAT8_SIG = Signature.of(("key", _T), ("subkey", _T), ("val", _F))

CGROUP_PATH_SIG = Signature.of(("controller", _T), ("path", _T))

PROC_DISKSTATS_SIG = Signature.of(
    ("major_number", _B),
    ("minor_number", _B),
    ("device_name", _T),
    ("reads_completed_successfully", _N),
    ("reads_merged", _N),
    ("sectors_read", _N),
    ("time_spent_reading_ms", _B),
    ("writes_completed", _N),
    ("writes_merged", _N),
    ("sectors_written", _N),
    ("time_spent_writing_ms", _B),
    ("ios_currently_in_progress", _B),
    ("time_spent_doing_ios_ms", _B),
    ("weighted_time_spent_doing_ios_ms", _B),
    ("discards_completed_successfully", _N),
    ("discards_merged", _N),
    ("sectors_discarded", _N),
    ("time_spent_discarding", _B),
    ("flush_requests_completed_successfully", _N),
    ("time_spent_flushing", _B),
)

PROC_MOUNTINFO_SIG = Signature.of(
    ("mount_id", _B),
    ("parent_id", _B),
    ("major_number", _B),
    ("minor_number", _B),
    ("root", _T),
    ("mount_point", _T),
    ("mount_options", _T),
    ("fs_type", _T),
    ("mount_source", _T),
    ("super_options", _T),
)

PROC_NETWORK_STATS_SIG = Signature.of(
    ("interface", _T),
    ("rx_bytes", _B),
    ("rx_packets", _B),
    ("rx_errs", _B),
    ("rx_drop", _B),
    ("rx_fifo", _B),
    ("rx_frame", _B),
    ("rx_compressed", _B),
    ("rx_multicast", _B),
    ("tx_bytes", _B),
    ("tx_packets", _B),
    ("tx_errs", _B),
    ("tx_drop", _B),
    ("tx_fifo", _B),
    ("tx_frame", _B),
    ("tx_compressed", _B),
    ("tx_multicast", _B),
)

FSINFO_SIG = Signature.of(
    ("major_number", _N),
    ("minor_number", _N),
    ("type", _T),
    ("block_size", _N),
    ("blocks", _N),
    ("total_bytes", _N),
    ("free_blocks", _N),
    ("free_bytes", _N),
    ("available_blocks", _N),
    ("available_bytes", _N),
    ("total_file_nodes", _N),
    ("free_file_nodes", _N),
    ("mount_flags", _T),
)

PROC_PID_IO_SIG = Signature.of(
    ("pid", _I),
    ("rchar", _N),
    ("wchar", _N),
    ("syscr", _N),
    ("syscw", _N),
    ("reads", _N),
    ("writes", _N),
    ("cwrites", _N),
)

PROC_PID_CMDLINE_SIG = Signature.of(
    ("pid", _I),
    ("fullcomm", _T),
    ("uid", _I),
    ("username", _T),
)

PROC_PID_STAT_SIG = Signature.of(
    ("pid", _I),
    ("comm", _T),
    ("state", _T),
    ("ppid", _I),
    ("pgrp", _I),
    ("session", _I),
    ("tty_nr", _I),
    ("tpgid", _I),
    ("flags", _B),
    ("minflt", _N),
    ("cminflt", _N),
    ("majflt", _N),
    ("cmajflt", _N),
    ("utime", _N),
    ("stime", _N),
    ("cutime", _B),
    ("cstime", _B),
    ("priority", _B),
    ("nice", _B),
    ("num_threads", _B),
    ("itrealvalue", _B),
    ("starttime", _N),
    ("vsize", _N),
    ("rss", _B),
    ("rsslim", _N),
    ("startcode", _N),
    ("endcode", _N),
    ("startstack", _N),
    ("kstkesp", _N),
    ("kstkeip", _N),
    ("signal", _N),
    ("blocked", _N),
    ("sigignore", _N),
    ("sigcatch", _N),
    ("wchan", _N),
    ("nswap", _N),
    ("cnswap", _N),
    ("exit_signal", _I),
    ("processor", _I),
    ("rt_priority", _B),
    ("policy", _B),
    ("delayacct_blkio_ticks", _N),
    ("guest_time", _N),
    ("cguest_time", _B),
    ("start_data", _N),
    ("end_data", _N),
    ("start_brk", _N),
    ("arg_start", _N),
    ("arg_end", _N),
    ("env_start", _N),
    ("env_end", _N),
    ("exit_code", _I),
)

PROC_CPUTIME_SIG = Signature.of(
    ("user", _B),
    ("nice", _B),
    ("system", _B),
    ("idle", _B),
    ("iowait", _B),
)

PROC_LOADAVG_SIG = Signature.of(
    ("load1", _F),
    ("load5", _F),
    ("load15", _F),
    ("last_pid", _I),
)

MEMUSAGE_SIG = Signature.of(
    ("memused", _B),
    ("memfree", _B),
    ("memshared", _B),
    ("membuffers", _B),
    ("memcached", _B),
    ("swapused", _B),
    ("swapfree", _B),
    ("swapcached", _B),
)

PG_PROCTAB_SIG = Signature.of(
    ("pid", _I),
    ("comm", _T),
    ("fullcomm", _T),
    ("state", _T),
    ("ppid", _I),
    ("pgrp", _I),
    ("session", _I),
    ("tty_nr", _I),
    ("tpgid", _I),
    ("flags", _I),
    ("minflt", _B),
    ("cminflt", _B),
    ("majflt", _B),
    ("cmajflt", _B),
    ("utime", _B),
    ("stime", _B),
    ("cutime", _B),
    ("cstime", _B),
    ("priority", _B),
    ("nice", _B),
    ("num_threads", _B),
    ("itrealvalue", _B),
    ("starttime", _B),
    ("vsize", _B),
    ("rss", _B),
    ("exit_signal", _I),
    ("processor", _I),
    ("rt_priority", _B),
    ("policy", _B),
    ("delayacct_blkio_ticks", _B),
    ("uid", _I),
    ("username", _T),
    ("rchar", _B),
    ("wchar", _B),
    ("syscr", _B),
    ("syscw", _B),
    ("reads", _B),
    ("writes", _B),
    ("cwrites", _B),
)

PG_DISKUSAGE_SIG = Signature.of(
    ("major", _I),
    ("minor", _I),
    ("devname", _T),
    ("reads_completed", _B),
    ("reads_merged", _B),
    ("sectors_read", _B),
    ("readtime", _B),
    ("writes_completed", _B),
    ("writes_merged", _B),
    ("sectors_written", _B),
    ("writetime", _B),
    ("current_io", _B),
    ("iotime", _B),
    ("totaliotime", _B),
    ("discards_completed", _B),
    ("discards_merged", _B),
    ("sectors_discarded", _B),
    ("discardtime", _B),
    ("flushes_completed", _B),
    ("flushtime", _B),
)
