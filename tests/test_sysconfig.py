"""
Tests for sysconfig parsing.
"""

import pytest

from sapprep.protocol.errors import FatalPrecondition
from sapprep.sysconfig_file import Sysconfig, parse_sysconfig


def test_parse_golden(sapconf):
    assert sapconf.get_int("VSZ_TMPFS_PERCENT") == 75
    assert sapconf.get("SHMMAX") == "18446744073692774399"
    assert sapconf.get("LIMIT_1") == "@sapsys soft nofile 1048576"
    assert not sapconf.is_yes("ENABLE_PAGECACHE_LIMIT")


def test_quoting_and_comments():
    values = parse_sysconfig(
        "A='single quoted'\n"
        'B="double # not a comment"\n'
        "C=plain # trailing comment\n"
        "export D=exported\n"
        "  # indented comment\n"
        "not an assignment\n"
    )
    assert values == {
        "A": "single quoted",
        "B": "double # not a comment",
        "C": "plain",
        "D": "exported",
    }


def test_unbalanced_quote_is_skipped():
    assert parse_sysconfig('A="open\nB=2\n') == {"B": "2"}


def test_empty_value_is_unset(sapconf):
    assert sapconf.get("PAGECACHE_LIMIT_MB") is None
    assert sapconf.get("PAGECACHE_LIMIT_MB", "0") == "0"
    assert "PAGECACHE_LIMIT_MB" not in sapconf
    assert "SHMALL" in sapconf


def test_non_integer():
    assert Sysconfig({"SEMMNI": "8192x"}).get_int("SEMMNI") is None


def test_with_prefix_is_sorted():
    config = Sysconfig({"LIMIT_2": "b", "LIMIT_1": "a", "OTHER": "c"})
    assert config.with_prefix("LIMIT_") == ["a", "b"]


def test_legacy_names():
    config = Sysconfig({"SHMMAX_MIN": "1000", "SEMMNI_MIN": "64", "SEMMNI": "128", "MAX_MAP_COUNT_DEF": "2000000"})
    config.apply_legacy_names()
    assert config.get("SHMMAX") == "1000"
    assert config.get("SEMMNI") == "128"
    assert config.get("MAX_MAP_COUNT") == "2000000"


def test_load(sapconf_file):
    config = Sysconfig.load(sapconf_file)
    assert config.path == sapconf_file
    assert config.get_int("SEMMNS") == 256000


def test_load_missing_file(tmp_path):
    with pytest.raises(FatalPrecondition):
        Sysconfig.load(tmp_path / "missing")
