"""Hard-link script files into the game directories.

Links are re-created on every run: the destination is removed first and
linked again, so a regenerated source (new inode) is picked up.  Hard links
only follow in-place edits, not renames or deletes, which is why the sync
loop keeps calling this.
"""

import logging
import os
from typing import Iterable, List, Sequence

from tas.config import RunConfig
from tas.errors import GameDirError, LinkError, MissingSource
from tas.games import classify
from tas.paths import ProjectContext

log = logging.getLogger("tas.mirror")

CFG_FILES = ("hltas.cfg", "ingame.cfg", "record.cfg", "editor.cfg", "cam.cfg")
SCRIPT_EXT = ".hltas"


def force_link(src: str, dest: str) -> None:
    try:
        if os.path.lexists(dest):
            os.remove(dest)
        os.link(src, dest)
    except OSError as e:
        raise LinkError(f"failed to hard-link {src} to {dest}") from e


def link_scripts(
    source_dir: str,
    destination_dirs: Sequence[str],
    file_names: Iterable[str] = CFG_FILES,
    silent: bool = False,
) -> None:
    names = list(file_names)
    for dest_dir in destination_dirs:
        for name in names:
            src = os.path.join(source_dir, name)
            if not os.path.isfile(src):
                raise MissingSource(src)
            dest = os.path.join(dest_dir, name)
            if os.path.lexists(dest) and not silent:
                log.info("%s is already linked in %s, relinking", name, dest_dir)
            force_link(src, dest)
            log.debug("Linked %s -> %s", src, dest)


def _game_roots(cfg: RunConfig) -> List[str]:
    roots = [cfg.half_life_dir]
    if cfg.no_client_dll_dir:
        roots.append(cfg.no_client_dll_dir)
    return roots


def link_cfgs(cfg: RunConfig, silent: bool = False) -> int:
    """Link the TAS cfgs into every game on both sides.  Returns the game dir count."""
    if not cfg.cfgs_dir:
        raise LinkError("no cfgs dir set in the config")
    linked = 0
    for root in _game_roots(cfg):
        try:
            entries = classify(root)
        except GameDirError:
            if root == cfg.half_life_dir:
                raise
            log.warning("Mirror game directory %s is not readable, skipping", root)
            continue
        dests = [os.path.join(root, e.name) for e in entries if e.name not in cfg.ignore_games]
        if not silent:
            for d in dests:
                log.info("Linking cfgs into %s", d)
        link_scripts(cfg.cfgs_dir, dests, CFG_FILES, silent=silent)
        linked += len(dests)
    return linked


def scripts_in_dir(path: str) -> List[str]:
    try:
        names = os.listdir(path)
    except OSError as e:
        raise GameDirError(f"failed to read directory {path}") from e
    return sorted(
        os.path.join(path, n) for n in names
        if n.lower().endswith(SCRIPT_EXT) and os.path.isfile(os.path.join(path, n))
    )


def project_scripts(ctx: ProjectContext, cfg: RunConfig) -> List[str]:
    """The current project's scripts, or every project's when run from the root."""
    if ctx.project_dir:
        return scripts_in_dir(ctx.project_dir)
    try:
        projects = sorted(os.listdir(cfg.project_dir))
    except OSError as e:
        raise GameDirError(f"failed to read project dir {cfg.project_dir}") from e
    scripts: List[str] = []
    for name in projects:
        path = os.path.join(cfg.project_dir, name)
        if os.path.isdir(path):
            scripts.extend(scripts_in_dir(path))
    return scripts


def link_tas_scripts(ctx: ProjectContext, cfg: RunConfig, silent: bool = False) -> List[str]:
    """Link project .hltas files into the game roots.  Returns the linked sources."""
    scripts = project_scripts(ctx, cfg)
    log.debug("Scripts: %s", scripts)
    for src in scripts:
        if not silent:
            log.info("Linking %s", src)
        name = os.path.basename(src)
        for root in _game_roots(cfg):
            force_link(src, os.path.join(root, name))
    return scripts
