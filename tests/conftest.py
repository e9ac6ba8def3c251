"""Pytest fixtures and test utilities."""

import hashlib
from pathlib import Path

import pytest

from dirchecksum.utils import config as config_module


def md5(*parts: bytes) -> bytes:
    """MD5 of the concatenation of ``parts``."""
    return hashlib.md5(b"".join(parts)).digest()


def build_tree(root: Path, layout: dict) -> Path:
    """Create files (str/bytes values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        elif isinstance(value, bytes):
            target.write_bytes(value)
        else:
            target.write_text(value)
    return root


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the global config at an empty per-test directory."""
    cfg = config_module.Config(config_dir=tmp_path / "config")
    monkeypatch.setattr(config_module, "_config", cfg)
    return cfg


@pytest.fixture
def temp_tree_dir(tmp_path):
    """Create a temporary directory to build trees in."""
    trees = tmp_path / "trees"
    trees.mkdir()
    return trees


@pytest.fixture
def sample_tree(temp_tree_dir):
    """root/{a.txt, b.txt, sub/{c.txt}}."""
    return build_tree(
        temp_tree_dir / "root",
        {
            "a.txt": "Alpha",
            "b.txt": "Beta",
            "sub": {"c.txt": "Gamma"},
        },
    )


@pytest.fixture
def sample_tree_digest():
    """Expected MD5 digest of ``sample_tree``, built by hand."""
    return md5(
        b"root",
        md5(b"a.txt", b"Alpha"),
        md5(b"b.txt", b"Beta"),
        md5(b"sub", md5(b"c.txt", b"Gamma")),
    )


@pytest.fixture
def nested_tree(temp_tree_dir):
    """A wider tree with empty files, empty directories and nesting."""
    return build_tree(
        temp_tree_dir / "project",
        {
            "README.md": "# project\n",
            "empty.bin": b"",
            "src": {
                "main.py": "print('hi')\n",
                "util": {"helpers.py": "x = 1\n", "data.bin": bytes(range(256)) * 64},
                "empty_dir": {},
            },
            "docs": {"index.rst": "Docs", "img": {"logo.png": b"\x89PNG\r\n\x1a\n"}},
            "Zeta": "upper-case name sorts before lower-case",
        },
    )
