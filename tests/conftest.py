"""
Shared fixtures for the sapprep test suite.
"""

import pytest

from sapprep.sysconfig_file import Sysconfig, parse_sysconfig

from mocks import FakeHost, SAPCONF


@pytest.fixture
def host(tmp_path):
    """An untuned fake host with its own state directory and limits file."""
    return FakeHost(tmp_path)


@pytest.fixture
def sapconf():
    """The golden sysconfig, parsed."""
    config = Sysconfig(parse_sysconfig(SAPCONF))
    config.apply_legacy_names()
    return config


@pytest.fixture
def sapconf_file(tmp_path):
    path = tmp_path / "sapconf"
    path.write_text(SAPCONF)
    return path
