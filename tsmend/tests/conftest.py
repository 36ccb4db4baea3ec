"""Shared fixtures: small on-disk TypeScript projects."""

import os
from typing import Dict

import pytest

from tsmend.core.project import ProjectIndex


def write_files(root, files: Dict[str, str]) -> str:
    """Write {relative_path: content} under root and return root as a string."""
    for rel_path, content in files.items():
        path = os.path.join(str(root), rel_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    return str(root)


@pytest.fixture
def write_project(tmp_path):
    """Factory writing a project tree into tmp_path."""
    def _write(files: Dict[str, str]) -> str:
        return write_files(tmp_path, files)
    return _write


@pytest.fixture
def load_project(write_project):
    """Factory writing a project tree and loading it into a full ProjectIndex."""
    def _load(files: Dict[str, str], /, **kwargs) -> ProjectIndex:
        root = write_project(files)
        return ProjectIndex.load(root, **kwargs)
    return _load
