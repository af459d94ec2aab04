"""link-hltas, link-cfgs, sync-saves and sync commands for tas_tools."""

import logging

from tas import sync_loop
from tas.config import RunConfig
from tas.errors import ConfigError, describe
from tas.mirror import link_cfgs, link_tas_scripts
from tas.paths import ProjectContext
from tas.saves import SyncReport

log = logging.getLogger("tas.sync")


def _print_report(label: str, report: SyncReport) -> int:
    for o in report.copies():
        print(f"  {o.game}/{o.file_name}: {o.action}")
    if report.errors:
        for err in report.errors:
            print(f"[tas] FAIL: {label} -- {describe(err)}")
        return 1
    print(f"[tas] PASS: {label} -- {len(report.copies())} copied, "
          f"{len(report.outcomes) - len(report.copies())} unchanged")
    return 0


def link_hltas(ctx: ProjectContext, cfg: RunConfig, keep_alive: bool = False) -> int:
    if keep_alive:
        log.info("Linking scripts every %gs (Ctrl+C to stop)...", sync_loop.SYNC_INTERVAL)
        sync_loop.run(ctx, cfg, forever=True, link=True, saves=False)
        return 0
    scripts = link_tas_scripts(ctx, cfg)
    print(f"[tas] PASS: link-hltas -- linked {len(scripts)} scripts")
    return 0


def link_cfg_files(cfg: RunConfig) -> int:
    count = link_cfgs(cfg)
    print(f"[tas] PASS: link-cfgs -- linked cfgs into {count} game dirs")
    return 0


def _require_mirror(cfg: RunConfig) -> None:
    if not cfg.no_client_dll_dir:
        raise ConfigError("no client DLL dir not set in the config, can't sync saves")


def sync_saves(ctx: ProjectContext, cfg: RunConfig, keep_alive: bool = False) -> int:
    _require_mirror(cfg)
    if keep_alive:
        log.info("Syncing saves every %gs (Ctrl+C to stop)...", sync_loop.SYNC_INTERVAL)
        sync_loop.run(ctx, cfg, forever=True, link=False, saves=True)
        return 0
    return _print_report("sync-saves", sync_loop.run(ctx, cfg, forever=False, link=False))


def sync_all(ctx: ProjectContext, cfg: RunConfig) -> int:
    log.info("Starting sync...")
    sync_loop.run(ctx, cfg, forever=True)
    return 0
