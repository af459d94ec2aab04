"""One-shot and keep-alive synchronization of scripts and saves.

A pass links the project scripts (and cfgs, when the cfgs dir exists) into
both game roots, then reconciles the save dirs.  The two steps always run one
after the other so they never write the same tree at the same time.
"""

import logging
import os
import threading
from typing import Optional

from tas.config import RunConfig
from tas.errors import CopyFailed, TasError, describe
from tas.mirror import link_cfgs, link_tas_scripts
from tas.paths import ProjectContext
from tas.saves import SyncReport, reconcile

log = logging.getLogger("tas.sync")

SYNC_INTERVAL = 1.0


def _link_step(ctx: ProjectContext, cfg: RunConfig, silent: bool) -> None:
    link_tas_scripts(ctx, cfg, silent=silent)
    if cfg.cfgs_dir and os.path.isdir(cfg.cfgs_dir):
        link_cfgs(cfg, silent=silent)


def _save_step(cfg: RunConfig) -> SyncReport:
    if not cfg.no_client_dll_dir:
        return SyncReport()
    return reconcile(cfg.save_dir_name, cfg.half_life_dir, cfg.no_client_dll_dir)


def sync_once(
    ctx: ProjectContext,
    cfg: RunConfig,
    *,
    link: bool = True,
    saves: bool = True,
    silent: bool = True,
) -> SyncReport:
    """One pass that raises the first fatal error."""
    if link:
        _link_step(ctx, cfg, silent)
    if saves:
        return _save_step(cfg)
    return SyncReport()


def _guarded_pass(ctx: ProjectContext, cfg: RunConfig, link: bool, saves: bool) -> SyncReport:
    """One pass where a failed step is logged and the next step still runs."""
    if link:
        try:
            link_tas_scripts(ctx, cfg, silent=True)
        except TasError as e:
            log.warning("Script linking failed: %s", describe(e))
        if cfg.cfgs_dir and os.path.isdir(cfg.cfgs_dir):
            try:
                link_cfgs(cfg, silent=True)
            except TasError as e:
                log.warning("Cfg linking failed: %s", describe(e))
    if not saves:
        return SyncReport()
    try:
        report = _save_step(cfg)
    except TasError as e:
        log.warning("Save sync failed: %s", describe(e))
        return SyncReport()
    for o in report.copies():
        log.info("%s: %s %s", o.game, o.file_name, o.action)
    for err in report.errors:
        if not isinstance(err, CopyFailed):
            log.warning("%s", describe(err))
    return report


def run(
    ctx: ProjectContext,
    cfg: RunConfig,
    forever: bool,
    *,
    link: bool = True,
    saves: bool = True,
    stop: Optional[threading.Event] = None,
    interval: float = SYNC_INTERVAL,
) -> SyncReport:
    """Run one pass, or keep running passes every interval until stop is set.

    A single pass raises the first fatal error.  In forever mode a failure in
    the script, cfg or save step is logged and the other steps still run.
    Returns the report of the last pass.
    """
    if not forever:
        return sync_once(ctx, cfg, link=link, saves=saves, silent=False)

    stop = stop or threading.Event()
    last = SyncReport()
    passes = 0
    while not stop.is_set():
        last = _guarded_pass(ctx, cfg, link, saves)
        passes += 1
        if stop.wait(interval):
            break
    log.debug("Sync stopped after %d passes", passes)
    return last
