from __future__ import annotations

import logging
import os
import threading

import pytest

from tas import sync_loop
from tas.errors import GameDirError, MissingSource
from tas.paths import resolve_context

from conftest import write_file


class StopAfter(threading.Event):
    """Stop token that trips itself after a number of waits."""

    def __init__(self, waits: int):
        super().__init__()
        self.left = waits
        self.waits = 0

    def wait(self, timeout=None):
        self.waits += 1
        self.left -= 1
        if self.left <= 0:
            self.set()
        return self.is_set()


def test_single_pass_links_and_syncs(tas_root, load_cfg, make_project):
    root = tas_root()
    project = make_project(root)
    write_file(project / "run.hltas")
    write_file(root / "Half-Life-ncd" / "valve" / "SAVE" / "q.sav", "q", mtime=7)
    cfg = load_cfg(root)

    report = sync_loop.run(resolve_context(str(project)), cfg, forever=False)

    assert os.path.samefile(root / "Half-Life-ncd" / "run.hltas", project / "run.hltas")
    assert (root / "Half-Life" / "valve" / "SAVE" / "q.sav").read_text() == "q"
    assert [o.file_name for o in report.copies()] == ["q.sav"]


def test_single_pass_propagates_fatal_errors(tas_root, load_cfg):
    root = tas_root()
    os.rmdir(root / "tas")
    cfg = load_cfg(root)

    with pytest.raises(GameDirError):
        sync_loop.run(resolve_context(str(root)), cfg, forever=False)


def test_forever_runs_until_stopped(tas_root, load_cfg, make_project):
    root = tas_root()
    project = make_project(root)
    write_file(project / "run.hltas", "v1")
    cfg = load_cfg(root)
    stop = StopAfter(3)

    sync_loop.run(resolve_context(str(project)), cfg, forever=True, stop=stop, interval=0)

    assert stop.waits == 3
    assert (root / "Half-Life" / "run.hltas").read_text() == "v1"


def test_forever_keeps_syncing_saves_when_script_linking_fails(tas_root, load_cfg, caplog):
    root = tas_root()
    os.rmdir(root / "tas")
    write_file(root / "Half-Life-ncd" / "valve" / "SAVE" / "q.sav", "q", mtime=7)
    cfg = load_cfg(root)
    stop = StopAfter(2)

    with caplog.at_level(logging.WARNING, logger="tas"):
        sync_loop.run(resolve_context(str(root)), cfg, forever=True, stop=stop, interval=0)

    assert stop.waits == 2
    assert sum("Script linking failed" in r.getMessage() for r in caplog.records) == 2
    assert (root / "Half-Life" / "valve" / "SAVE" / "q.sav").read_text() == "q"


def test_forever_keeps_syncing_saves_when_a_cfg_is_missing(tas_root, load_cfg, make_project, caplog):
    root = tas_root()
    project = make_project(root)
    write_file(project / "run.hltas")
    write_file(root / "cfgs" / "hltas.cfg")
    write_file(root / "Half-Life-ncd" / "valve" / "SAVE" / "q.sav", "q", mtime=7)
    cfg = load_cfg(root)

    with caplog.at_level(logging.WARNING, logger="tas"):
        sync_loop.run(resolve_context(str(project)), cfg, forever=True,
                      stop=StopAfter(3), interval=0)

    assert sum("Cfg linking failed" in r.getMessage() for r in caplog.records) == 3
    assert (root / "Half-Life" / "run.hltas").is_file()
    assert (root / "Half-Life" / "valve" / "SAVE" / "q.sav").read_text() == "q"


def test_single_pass_stops_at_missing_cfg(tas_root, load_cfg):
    root = tas_root()
    write_file(root / "cfgs" / "hltas.cfg")
    write_file(root / "Half-Life-ncd" / "valve" / "SAVE" / "q.sav", "q", mtime=7)
    cfg = load_cfg(root)

    with pytest.raises(MissingSource):
        sync_loop.run(resolve_context(str(root)), cfg, forever=False)

    assert not (root / "Half-Life" / "valve" / "SAVE" / "q.sav").exists()

def test_saves_only_mode_skips_linking(tas_root, load_cfg, make_project):
    root = tas_root()
    project = make_project(root)
    write_file(project / "run.hltas")
    cfg = load_cfg(root)

    sync_loop.run(resolve_context(str(project)), cfg, forever=True, link=False,
                  stop=StopAfter(1), interval=0)

    assert not (root / "Half-Life" / "run.hltas").exists()
    assert (root / "Half-Life" / "valve" / "SAVE").is_dir()
