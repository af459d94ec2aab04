"""Game directory catalog.

A game is a sub-directory of a Half-Life install that carries a dlls/ or
cl_dlls/ directory.  HD and addon content ship as sibling directories
(<game>_hd, <game>_addon); those are folded into the base entry instead of
being listed on their own.
"""

import os
from dataclasses import dataclass
from typing import Iterable, List

from tas.errors import GameDirError

HD_SUFFIX = "_hd"
ADDON_SUFFIX = "_addon"
MARKER_DIRS = ("dlls", "cl_dlls")


@dataclass
class GameDirEntry:
    name: str
    has_hd: bool = False
    has_addon: bool = False

    def variant_names(self) -> List[str]:
        names = [self.name]
        if self.has_hd:
            names.append(self.name + HD_SUFFIX)
        if self.has_addon:
            names.append(self.name + ADDON_SUFFIX)
        return names


def _is_variant(name: str) -> bool:
    return name.endswith(HD_SUFFIX) or name.endswith(ADDON_SUFFIX)


def is_dir_game(path: str) -> bool:
    if not os.path.isdir(path):
        return False
    name = os.path.basename(os.path.normpath(path))
    if _is_variant(name):
        return False
    return any(os.path.isdir(os.path.join(path, m)) for m in MARKER_DIRS)


def classify(root_dir: str) -> List[GameDirEntry]:
    """Return one entry per game under root_dir, in discovery order."""
    try:
        names = os.listdir(root_dir)
    except OSError as e:
        raise GameDirError(f"failed to read game directory {root_dir}") from e

    entries: dict = {}
    for name in names:
        path = os.path.join(root_dir, name)
        if not os.path.isdir(path) or name in (HD_SUFFIX, ADDON_SUFFIX):
            continue
        if name.endswith(HD_SUFFIX):
            base = name[: -len(HD_SUFFIX)]
            entries.setdefault(base, GameDirEntry(base)).has_hd = True
        elif name.endswith(ADDON_SUFFIX):
            base = name[: -len(ADDON_SUFFIX)]
            entries.setdefault(base, GameDirEntry(base)).has_addon = True
        elif is_dir_game(path):
            entries.setdefault(name, GameDirEntry(name))
    return list(entries.values())


def games_in_dir(root_dir: str, ignore: Iterable[str] = ()) -> List[str]:
    ignored = set(ignore)
    return [e.name for e in classify(root_dir) if e.name not in ignored]
