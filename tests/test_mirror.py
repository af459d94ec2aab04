from __future__ import annotations

import os

import pytest

from tas.errors import LinkError, MissingSource
from tas.mirror import CFG_FILES, force_link, link_cfgs, link_scripts, link_tas_scripts
from tas.paths import resolve_context

from conftest import make_game, write_file


def _write_cfgs(cfgs_dir):
    for name in CFG_FILES:
        write_file(cfgs_dir / name, f"// {name}")


def test_link_scripts_creates_hard_links(tmp_path):
    src = tmp_path / "cfgs"
    _write_cfgs(src)
    dests = [tmp_path / "a", tmp_path / "b"]
    for d in dests:
        d.mkdir()

    link_scripts(str(src), [str(d) for d in dests])

    for d in dests:
        for name in CFG_FILES:
            assert os.path.samefile(d / name, src / name)


def test_relinking_is_idempotent(tmp_path):
    src = tmp_path / "cfgs"
    _write_cfgs(src)
    dest = tmp_path / "valve"
    dest.mkdir()

    link_scripts(str(src), [str(dest)])
    first = {n: (dest / n).read_text() for n in CFG_FILES}
    link_scripts(str(src), [str(dest)])

    assert {n: (dest / n).read_text() for n in CFG_FILES} == first
    assert os.stat(src / "hltas.cfg").st_nlink == 2


def test_regenerated_source_replaces_stale_link(tmp_path):
    src = write_file(tmp_path / "run.hltas", "version 1")
    dest = tmp_path / "game" / "run.hltas"
    dest.parent.mkdir()
    force_link(str(src), str(dest))

    src.unlink()
    write_file(src, "version 2")
    assert dest.read_text() == "version 1"

    force_link(str(src), str(dest))
    assert dest.read_text() == "version 2"
    assert os.path.samefile(src, dest)


def test_missing_source_fails(tmp_path):
    src = tmp_path / "cfgs"
    write_file(src / "hltas.cfg")
    dest = tmp_path / "valve"
    dest.mkdir()

    with pytest.raises(MissingSource) as exc:
        link_scripts(str(src), [str(dest)])
    assert exc.value.path.endswith("ingame.cfg")


def test_link_into_missing_destination_dir_fails(tmp_path):
    src = write_file(tmp_path / "a.cfg")

    with pytest.raises(LinkError):
        force_link(str(src), str(tmp_path / "nope" / "a.cfg"))


def test_link_cfgs_covers_both_sides_and_skips_ignored(tas_root, load_cfg):
    root = tas_root(games=("valve", "gearbox"))
    make_game(root / "Half-Life", ".bxt-ipc")
    _write_cfgs(root / "cfgs")
    cfg = load_cfg(root)

    count = link_cfgs(cfg)

    assert count == 4
    for side in ("Half-Life", "Half-Life-ncd"):
        for game in ("valve", "gearbox"):
            assert (root / side / game / "hltas.cfg").is_file()
    assert not (root / "Half-Life" / ".bxt-ipc" / "hltas.cfg").exists()


def test_link_tas_scripts_from_project(tas_root, load_cfg, make_project):
    root = tas_root()
    project = make_project(root)
    write_file(project / "c1a0.hltas", "frames")
    write_file(project / "notes.txt")
    cfg = load_cfg(root)

    linked = link_tas_scripts(resolve_context(str(project)), cfg)

    assert [os.path.basename(p) for p in linked] == ["c1a0.hltas"]
    assert os.path.samefile(root / "Half-Life" / "c1a0.hltas", project / "c1a0.hltas")
    assert os.path.samefile(root / "Half-Life-ncd" / "c1a0.hltas", project / "c1a0.hltas")
    assert not (root / "Half-Life" / "notes.txt").exists()


def test_link_tas_scripts_from_root_collects_every_project(tas_root, load_cfg, make_project):
    root = tas_root(mirror=False)
    write_file(make_project(root, "a") / "a.hltas")
    write_file(make_project(root, "b") / "b.hltas")
    cfg = load_cfg(root)

    linked = link_tas_scripts(resolve_context(str(root)), cfg, silent=True)

    assert sorted(os.path.basename(p) for p in linked) == ["a.hltas", "b.hltas"]
    assert (root / "Half-Life" / "a.hltas").is_file()
    assert (root / "Half-Life" / "b.hltas").is_file()
