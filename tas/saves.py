"""Save file reconciliation between the primary and mirror game roots.

Only games installed on the mirror side are synced.  For each of them the
save directories on both sides are compared by file name:

  only on one side        -> copied to the other side
  on both, one is newer   -> the newer one overwrites the older
  on both, same mtime     -> left alone

Nothing is ever deleted.  Equal timestamps are taken to mean the files are
already identical; contents are not compared.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Dict, List

from tas.errors import CopyFailed, DirCreateFailed, SyncError
from tas.games import classify

log = logging.getLogger("tas.saves")

SAVE_EXT = ".sav"

COPY_TO_MIRROR = "copy primary->mirror"
COPY_TO_PRIMARY = "copy mirror->primary"
NO_OP = "no-op (timestamps equal)"


@dataclass(frozen=True)
class SyncOutcome:
    game: str
    file_name: str
    action: str


@dataclass
class SyncReport:
    outcomes: List[SyncOutcome] = field(default_factory=list)
    errors: List[SyncError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def copies(self) -> List[SyncOutcome]:
        return [o for o in self.outcomes if o.action != NO_OP]

    def extend(self, other: "SyncReport") -> None:
        self.outcomes.extend(other.outcomes)
        self.errors.extend(other.errors)


def saves_in_dir(path: str) -> Dict[str, str]:
    """Map file name -> full path for every save file in path."""
    return {
        name: os.path.join(path, name)
        for name in os.listdir(path)
        if os.path.splitext(name)[1].lower() == SAVE_EXT and os.path.isfile(os.path.join(path, name))
    }


def _copy(report: SyncReport, game: str, name: str, src: str, dest: str, action: str) -> None:
    try:
        shutil.copy2(src, dest)
    except OSError as e:
        err = CopyFailed(f"failed to copy save file {src} to {dest}: {e}", game, name)
        err.__cause__ = e
        log.warning("%s", err)
        report.errors.append(err)
        return
    log.debug("%s: %s %s", game, name, action)
    report.outcomes.append(SyncOutcome(game, name, action))


def reconcile_game(game: str, primary_saves: str, mirror_saves: str) -> SyncReport:
    report = SyncReport()
    for path in (primary_saves, mirror_saves):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            err = DirCreateFailed(f"failed to create saves dir {path}: {e}", game)
            err.__cause__ = e
            report.errors.append(err)
            return report

    try:
        primary = saves_in_dir(primary_saves)
        mirror = saves_in_dir(mirror_saves)
    except OSError as e:
        err = SyncError(f"failed to read saves dir for {game}: {e}", game)
        err.__cause__ = e
        report.errors.append(err)
        return report

    for name in sorted(primary):
        src = primary[name]
        other = mirror.pop(name, None)
        if other is None:
            _copy(report, game, name, src, os.path.join(mirror_saves, name), COPY_TO_MIRROR)
            continue
        try:
            p_mtime = os.stat(src).st_mtime_ns
            m_mtime = os.stat(other).st_mtime_ns
        except OSError as e:
            err = SyncError(f"failed to stat save file {name}: {e}", game, name)
            err.__cause__ = e
            report.errors.append(err)
            continue
        if p_mtime > m_mtime:
            _copy(report, game, name, src, other, COPY_TO_MIRROR)
        elif m_mtime > p_mtime:
            _copy(report, game, name, other, src, COPY_TO_PRIMARY)
        else:
            report.outcomes.append(SyncOutcome(game, name, NO_OP))

    for name in sorted(mirror):
        _copy(report, game, name, mirror[name], os.path.join(primary_saves, name), COPY_TO_PRIMARY)
    return report


def reconcile(save_dir_name: str, primary_root: str, mirror_root: str) -> SyncReport:
    """Sync the save dirs of every game installed in mirror_root.

    Raises GameDirError if mirror_root cannot be listed.  Per-game and
    per-file failures are collected in the report instead.
    """
    report = SyncReport()
    for entry in classify(mirror_root):
        report.extend(reconcile_game(
            entry.name,
            os.path.join(primary_root, entry.name, save_dir_name),
            os.path.join(mirror_root, entry.name, save_dir_name),
        ))
    return report
