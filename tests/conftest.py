# tests/conftest.py
"""
This module contains shared fixtures for the pytest suite.
Fixtures defined here are automatically available to all test functions.
"""

import pytest
from pyfakefs.fake_filesystem_unittest import Patcher

MARKER = "# >>> tgzpack backup list >>>"

INSTALL_SCRIPT = (
    "#!/bin/sh\n"
    "set -eu\n"
    'echo "installing"\n'
    f"{MARKER}\n"
    "old/entry.txt\n"
)


@pytest.fixture
def fake_fs():
    """
    Initializes a fake filesystem using pyfakefs for tests that
    walk or modify directory trees without touching the real disk.
    """
    with Patcher() as patcher:
        yield patcher.fs


@pytest.fixture
def install_script_text():
    """The install script used by the sample source trees."""
    return INSTALL_SCRIPT


@pytest.fixture
def source_tree(tmp_path):
    """
    Builds a real source tree:
        src/INSTALL.sh, src/old.tgz, src/a.txt,
        src/nested/inner.txt, src/nested/deeper/stale.tgz
    """
    root = tmp_path / "src"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "INSTALL.sh").write_text(INSTALL_SCRIPT)
    (root / "INSTALL.sh").chmod(0o755)
    (root / "old.tgz").write_bytes(b"stale archive")
    (root / "a.txt").write_text("alpha\n")
    (root / "nested" / "inner.txt").write_text("inner\n")
    (root / "nested" / "deeper" / "stale.tgz").write_bytes(b"stale nested archive")
    return root
