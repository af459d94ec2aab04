from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import pytest

from tas.config import CONFIG_FILE_NAME, PROJECT_FILE_NAME, load_config


def make_game(root: Path, name: str, marker: str = "dlls") -> Path:
    game = root / name
    (game / marker).mkdir(parents=True, exist_ok=True)
    return game


def write_file(path: Path, data: str = "stub", mtime: Optional[float] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture(autouse=True)
def _reset_tas_logger():
    yield
    log = logging.getLogger("tas")
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    log.propagate = True
    log.setLevel(logging.NOTSET)


@pytest.fixture
def tas_root(tmp_path: Path):
    """A root dir with a primary and a mirror install, both holding 'valve'."""

    def _build(games: Iterable[str] = ("valve",), mirror: bool = True, **overrides) -> Path:
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        for g in games:
            make_game(root / "Half-Life", g)
            if mirror:
                make_game(root / "Half-Life-ncd", g, marker="cl_dlls")
        (root / "tas").mkdir(exist_ok=True)
        data = {
            "half_life_dir": "Half-Life",
            "no_client_dll_dir": "Half-Life-ncd" if mirror else None,
        }
        data.update(overrides)
        (root / CONFIG_FILE_NAME).write_text(json.dumps(data), encoding="utf-8")
        return root

    return _build


@pytest.fixture
def make_project():
    def _make(root: Path, name: str = "run1", game: str = "valve") -> Path:
        project = root / "tas" / name
        project.mkdir(parents=True, exist_ok=True)
        (project / PROJECT_FILE_NAME).write_text(json.dumps({"game": game}), encoding="utf-8")
        return project

    return _make


@pytest.fixture
def load_cfg():
    def _load(root: Path):
        return load_config(str(root))

    return _load
