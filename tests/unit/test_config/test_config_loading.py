"""
Unit tests for configuration loading, validation and the config singleton.
"""

import tomllib

import pytest
import toml

from nodemx.config import (
    clear_config_cache,
    get_config,
    get_config_path,
    is_config_loaded,
    load_main_config,
    set_config_path,
    validate_nodemx_config,
)
from nodemx.models import NodemxConfig
from nodemx.validation import ValidationError


def _write_config(path, data):
    with open(path, "w") as f:
        toml.dump(data, f)
    return path


@pytest.mark.unit
class TestNodemxConfigValidation:
    """Test cases for validate_nodemx_config()."""

    def test_defaults(self):
        config = validate_nodemx_config({})

        assert config == NodemxConfig()
        assert config.cgroup_root == "/sys/fs/cgroup"
        assert config.kdapi_path == "/etc/podinfo"
        assert config.containerized is None

    def test_all_keys(self):
        config = validate_nodemx_config({
            "cgroupfs_enabled": False,
            "cgroup_root": "/mnt/cgroup/",
            "containerized": True,
            "kdapi_enabled": False,
            "kdapi_path": "/var/podinfo",
            "procfs_enabled": False,
            "procfs_root": "/host/proc",
        })

        assert config.cgroupfs_enabled is False
        assert config.cgroup_root == "/mnt/cgroup"
        assert config.containerized is True
        assert config.procfs_root == "/host/proc"

    def test_unknown_key(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_nodemx_config({"cgroup_rot": "/sys/fs/cgroup"})
        assert "cgroup_rot" in str(exc_info.value)

    def test_wrong_type(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_nodemx_config({"kdapi_enabled": "yes"})
        assert "nodemx.kdapi_enabled" in str(exc_info.value)

    def test_relative_root(self):
        with pytest.raises(ValidationError):
            validate_nodemx_config({"procfs_root": "proc"})


@pytest.mark.unit
class TestConfigLoading:
    """Test cases for the TOML loader and the singleton."""

    def test_load_from_file(self, temp_dir):
        path = _write_config(temp_dir / "config.toml", {
            "nodemx": {"cgroup_root": "/mnt/cgroup", "containerized": False},
        })
        set_config_path(path)

        config = get_config()

        assert get_config_path() == path
        assert config.cgroup_root == "/mnt/cgroup"
        assert config.containerized is False
        assert is_config_loaded()
        assert get_config() is config

    def test_missing_file_uses_defaults(self, temp_dir):
        set_config_path(temp_dir / "absent.toml")
        assert get_config() == NodemxConfig()

    def test_file_without_section(self, temp_dir):
        path = _write_config(temp_dir / "config.toml", {"other": {"x": 1}})
        assert load_main_config(path) == {}

    def test_section_must_be_a_table(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("nodemx = 1\n")
        with pytest.raises(TypeError):
            load_main_config(path)

    def test_malformed_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[nodemx\n")
        set_config_path(path)
        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value_in_file(self, temp_dir):
        path = _write_config(temp_dir / "config.toml", {"nodemx": {"procfs_enabled": 1}})
        set_config_path(path)
        with pytest.raises(ValidationError):
            get_config()

    def test_clear_cache(self, temp_dir):
        path = _write_config(temp_dir / "config.toml", {"nodemx": {"procfs_root": "/a"}})
        set_config_path(path)
        assert get_config().procfs_root == "/a"

        _write_config(path, {"nodemx": {"procfs_root": "/b"}})
        assert get_config().procfs_root == "/a"
        clear_config_cache()
        assert not is_config_loaded()
        assert get_config().procfs_root == "/b"
