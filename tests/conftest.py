"""Pytest configuration and shared fixtures for pkgscope tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from pkgscope.config.environment import CompilerId, Environment


@pytest.fixture
def linux_env() -> Environment:
    """Linux/x86_64 environment with ghc 9.6.3 and no flags enabled."""
    return Environment.create("linux", "x86_64", CompilerId.parse("ghc-9.6.3"))


@pytest.fixture
def write_metadata(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """Write a metadata document to tmp_path/package.json and return its path."""

    def write(document: Dict[str, Any], name: str = "package.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return write


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., None]:
    """Create empty files (and their parent directories) under tmp_path."""

    def make(*relative: str) -> None:
        for rel in relative:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

    return make
