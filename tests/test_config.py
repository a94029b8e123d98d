"""
Tests for tool configuration loading.
"""

import argparse

import pytest

from sapprep import config as config_module
from sapprep.config import Config, FloorsConfig
from sapprep.protocol.tunables import MAX_MAP_COUNT, SHMMAX


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "nowhere.toml"])
    for name in ("SAPPREP_CONFIG", "SAPPREP_STATE_DIR", "SAPPREP_SYSCONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config.load()
    assert config.paths.sysconfig == "/etc/sysconfig/sapconf"
    assert config.floors.for_key(MAX_MAP_COUNT) == 2000000
    assert config.floors.for_key(SHMMAX) is None
    assert config.floors.sem_floors() == (1250, 256000, 100, 8192)
    assert config.validate() == []
    assert "Config: (defaults)" in config.summary()


def test_load_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[paths]\n'
        'state_dir = "/srv/sapprep/state"\n'
        '\n'
        '[floors]\n'
        'shmmax = 68719476736\n'
        'max_map_count = 0\n'
        'sem = []\n'
        '\n'
        '[logging]\n'
        'level = "DEBUG"\n'
        'file = ""\n'
        '\n'
        '[service]\n'
        'uuidd_unit = "uuidd.service"\n'
        '\n'
        '[limits]\n'
        'groups = ["@sapsys"]\n'
    )

    config = Config.load(str(path))

    assert config.paths.state_dir == "/srv/sapprep/state"
    assert config.paths.limits_file == "/etc/security/limits.conf"
    assert config.floors.shmmax == 68719476736
    assert config.floors.max_map_count is None
    assert config.floors.sem is None
    assert config.floors.sem_floors() == (None, None, None, None)
    assert config.logging.level == "DEBUG"
    assert config.logging.file is None
    assert config.service.uuidd_unit == "uuidd.service"
    assert config.limits.groups == ["@sapsys"]
    assert f"Config: {path}" in config.summary()


def test_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.toml"
    path.write_text('[paths]\nshm_mount = "/run/shm"\n')
    monkeypatch.setenv("SAPPREP_CONFIG", str(path))

    assert Config.load().paths.shm_mount == "/run/shm"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(str(tmp_path / "missing.toml"))


def test_search_paths(tmp_path, monkeypatch):
    path = tmp_path / "found.toml"
    path.write_text('[service]\nuuidd_unit = "found.socket"\n')
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "first.toml", path])

    assert Config.load().service.uuidd_unit == "found.socket"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SAPPREP_STATE_DIR", "/tmp/state")
    monkeypatch.setenv("SAPPREP_SYSCONFIG", "/tmp/sapconf")

    config = Config.load()
    assert config.paths.state_dir == "/tmp/state"
    assert config.paths.sysconfig == "/tmp/sapconf"


def test_argument_overrides(monkeypatch):
    monkeypatch.setenv("SAPPREP_STATE_DIR", "/tmp/state")
    args = argparse.Namespace(sysconfig="./sapconf", state_dir="/tmp/args", log_file=None, verbose=True)

    config = Config.load().override_from_args(args)

    assert config.paths.sysconfig == "./sapconf"
    assert config.paths.state_dir == "/tmp/args"
    assert config.logging.file == "/var/log/sapprep.log"
    assert config.logging.level == "DEBUG"


def test_validate():
    config = Config()
    config.floors = FloorsConfig(shmall=-1, sem=(1, 2, 3))
    config.limits.groups = []
    config.logging.level = "LOUD"

    errors = config.validate()

    assert len(errors) == 4
    assert any("floors.sem" in e for e in errors)
    assert any("floors.shmall" in e for e in errors)


def test_sem_floors_must_be_integers():
    config = Config._from_dict({"floors": {"sem": ["1250", "256000", "100", "8192"]}})
    errors = config.validate()
    assert len(errors) == 1
    assert "floors.sem" in errors[0]


def test_sem_floors_reject_booleans_and_negatives():
    assert Config._from_dict({"floors": {"sem": [1250, True, 100, 8192]}}).validate()
    assert Config._from_dict({"floors": {"sem": [1250, 256000, -1, 8192]}}).validate()


def test_sem_floors_as_string():
    assert Config._from_dict({"floors": {"sem": "1250 256000 100 8192"}}).validate()


def test_boolean_scalar_floor():
    errors = Config._from_dict({"floors": {"max_map_count": True}}).validate()
    assert errors == ["floors.max_map_count must be a non-negative integer"]
