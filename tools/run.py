"""run-game command: compose the Half-Life command line and start it."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from tas.companions import run_r_input, run_tas_view
from tas.config import RunConfig, load_project
from tas.errors import ConfigError
from tas.launch_args import RunFlags, build_args, default_geometry
from tas.paths import ProjectContext
from tas.supervisor import LaunchSpec, env_with_script, launch_many, launch_once

log = logging.getLogger("tas.run")


@dataclass
class RunGameOptions:
    sim: bool = False
    low: bool = False
    record: bool = False
    vanilla_game: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    no_bxt: bool = False
    run_script: Optional[str] = None
    game: Optional[str] = None
    instances: Optional[int] = None
    keep_alive: bool = False
    r_input: bool = False
    no_tas_view: bool = False
    params: List[str] = field(default_factory=list)


def game_dir_for(cfg: RunConfig, opts: RunGameOptions) -> str:
    """Vanilla, simulator and multi-instance runs use the normal install."""
    if opts.vanilla_game or opts.sim or opts.instances is not None:
        return cfg.half_life_dir
    if not cfg.no_client_dll_dir:
        raise ConfigError("no client DLL dir not set in the config")
    return cfg.no_client_dll_dir


def selected_game(ctx: ProjectContext, opts: RunGameOptions) -> str:
    if opts.game:
        return opts.game
    if ctx.project_dir:
        return load_project(ctx.project_dir).game
    raise ConfigError("no project.json found -- use --game to pick a game")


def build_spec(ctx: ProjectContext, cfg: RunConfig, opts: RunGameOptions) -> LaunchSpec:
    hl_dir = game_dir_for(cfg, opts)
    game = selected_game(ctx, opts)
    dw, dh = default_geometry(low=opts.low, record=opts.record)
    flags = RunFlags(
        low=opts.low,
        record=opts.record,
        sim=opts.sim,
        width=opts.width or dw,
        height=opts.height or dh,
    )
    use_injector = not opts.no_bxt
    # Through the injector the script goes in BXT_SCRIPT, not on the command line.
    script_via_env = use_injector and opts.instances is None
    args = build_args(
        game,
        flags,
        script=None if script_via_env else opts.run_script,
        extra=opts.params,
    )
    log.debug("HL args: %s", args)
    return LaunchSpec(
        game_exe_path=os.path.join(hl_dir, cfg.game_exe),
        working_dir=hl_dir,
        args=tuple(args),
        use_injector=use_injector,
        injector_path=cfg.injector_exe if use_injector else None,
        env=env_with_script(opts.run_script) if script_via_env else {},
        detached=not use_injector,
    )


def run_game(ctx: ProjectContext, cfg: RunConfig, opts: RunGameOptions) -> int:
    spec = build_spec(ctx, cfg, opts)

    if opts.instances is not None:
        log.info("Running %d games...", opts.instances)
        started = launch_many(spec, opts.instances, opts.keep_alive)
        print(f"[tas] PASS: run-game -- launched {started} of {opts.instances} games")
        return 0

    log.info("Running game...")
    launch_once(spec)

    if opts.r_input:
        run_r_input(cfg.r_input_exe, cfg.game_exe)
    if not (opts.no_tas_view or opts.sim):
        run_tas_view(cfg.tas_view_dir)
    print(f"[tas] PASS: run-game -- started {os.path.basename(spec.command()[0])}")
    return 0
