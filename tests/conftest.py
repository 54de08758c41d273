"""
Shared fixtures for linkdedup tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log_dir(tmp_path, monkeypatch) -> Path:
    """Points the audit log at a throwaway folder for the whole test."""
    path = tmp_path / "logs"
    monkeypatch.setenv("LINKDEDUP_LOG_DIR", str(path))
    return path


@pytest.fixture
def test_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a controlled tree for deduplication scenarios:
    - a.txt and b.txt: identical ("hello"), a.txt is found first
    - c.txt: unique ("world")
    - sub/d.txt: third copy of "hello"
    - a_link.txt: hard link to a.txt
    - .DS_Store and .localized: identical to "hello", never eligible
    - pkg.app/inner.txt: identical to "hello", inside a bundle directory
    - loose.lnk: symlink to a.txt
    """
    files = {}

    files["a"] = temp_dir / "a.txt"
    files["a"].write_bytes(b"hello")
    files["b"] = temp_dir / "b.txt"
    files["b"].write_bytes(b"hello")
    files["c"] = temp_dir / "c.txt"
    files["c"].write_bytes(b"world")

    sub = temp_dir / "sub"
    sub.mkdir()
    files["d"] = sub / "d.txt"
    files["d"].write_bytes(b"hello")

    files["a_link"] = temp_dir / "a_link.txt"
    os.link(files["a"], files["a_link"])

    files["ds_store"] = temp_dir / ".DS_Store"
    files["ds_store"].write_bytes(b"hello")
    files["localized"] = temp_dir / ".localized"
    files["localized"].write_bytes(b"hello")

    bundle = temp_dir / "pkg.app"
    bundle.mkdir()
    files["bundled"] = bundle / "inner.txt"
    files["bundled"].write_bytes(b"hello")

    files["symlink"] = temp_dir / "loose.lnk"
    os.symlink(files["a"], files["symlink"])

    return files
