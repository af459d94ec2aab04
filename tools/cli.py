"""argparse routing for tas_tools."""

import argparse
from typing import Optional

from tas.config import load_config
from tas.errors import TasError, describe
from tas.log import setup_log
from tas.paths import resolve_context
from tools import games as game_tools
from tools import run as run_tools
from tools import sync as sync_tools


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TAS practice environment manager")
    p.add_argument("--debug", action="store_true", help="Print detailed log output.")
    sub = p.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------- games
    sub.add_parser("games", help="List the games installed in the Half-Life directory")

    # ---------------------------------------------------------------- run-game
    p_run = sub.add_parser("run-game", help="Run Half-Life (once, or several instances)")
    p_run.add_argument("--sim", action="store_true", help="Run as the TAS simulator client")
    p_run.add_argument("--low", action="store_true", help="Lowest graphics settings")
    p_run.add_argument("--record", action="store_true", help="Borderless window for recording")
    p_run.add_argument(
        "--vanilla-game", action="store_true",
        help="Use the normal Half-Life directory instead of the no client DLL one",
    )
    p_run.add_argument("-W", "--width", type=int, help="Window width (default depends on mode)")
    p_run.add_argument("-H", "--height", type=int, help="Window height (default depends on mode)")
    p_run.add_argument("--no-bxt", action="store_true", help="Start hl.exe without the injector")
    p_run.add_argument("--run-script", metavar="PATH", help="TAS script to load on startup")
    p_run.add_argument("--game", help="Game to run (default: the project's game)")
    p_run.add_argument(
        "--instances", type=int, metavar="N",
        help="Run N games one after another (optimisation runs)",
    )
    p_run.add_argument(
        "--keep-alive", action="store_true",
        help="With --instances: restart games that exit until Ctrl+C",
    )
    p_run.add_argument("--r-input", action="store_true", help="Run RInput after the game")
    p_run.add_argument("--no-tas-view", action="store_true", help="Do not start TASView")
    p_run.add_argument("params", nargs="*", help="Extra game parameters (after --)")

    # -------------------------------------------------------------------- link
    p_link = sub.add_parser("link-hltas", help="Hard-link project .hltas files into the game dirs")
    p_link.add_argument("--keep-alive", action="store_true", help="Relink every second until Ctrl+C")

    sub.add_parser("link-cfgs", help="Hard-link the TAS cfgs into every game dir")

    # ------------------------------------------------------------------- saves
    p_saves = sub.add_parser("sync-saves", help="Sync save files between both game dirs")
    p_saves.add_argument("--keep-alive", action="store_true", help="Sync every second until Ctrl+C")

    sub.add_parser("sync", help="Link scripts and sync saves every second until Ctrl+C")

    return p


def _validate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.command != "run-game":
        return
    if args.instances is not None:
        if args.instances < 1:
            parser.error("--instances must be at least 1")
        if args.no_bxt or args.run_script:
            parser.error("--instances cannot be combined with --no-bxt or --run-script")
    elif args.keep_alive:
        parser.error("--keep-alive requires --instances")
    for name in ("width", "height"):
        value = getattr(args, name)
        if value is not None and value < 1:
            parser.error(f"--{name} must be positive")


def _run_options(args: argparse.Namespace) -> run_tools.RunGameOptions:
    return run_tools.RunGameOptions(
        sim=args.sim,
        low=args.low,
        record=args.record,
        vanilla_game=args.vanilla_game,
        width=args.width,
        height=args.height,
        no_bxt=args.no_bxt,
        run_script=args.run_script,
        game=args.game,
        instances=args.instances,
        keep_alive=args.keep_alive,
        r_input=args.r_input,
        no_tas_view=args.no_tas_view,
        params=[p for p in args.params if p != "--"],
    )


def _dispatch(args: argparse.Namespace, cwd: Optional[str]) -> int:
    ctx = resolve_context(cwd)
    log = setup_log(ctx.root_dir, debug=args.debug)
    log.info("Loading config...")
    cfg = load_config(ctx.root_dir)

    if args.command == "games":
        return game_tools.print_games(game_tools.games_list(cfg))
    if args.command == "run-game":
        return run_tools.run_game(ctx, cfg, _run_options(args))
    if args.command == "link-hltas":
        return sync_tools.link_hltas(ctx, cfg, keep_alive=args.keep_alive)
    if args.command == "link-cfgs":
        return sync_tools.link_cfg_files(cfg)
    if args.command == "sync-saves":
        return sync_tools.sync_saves(ctx, cfg, keep_alive=args.keep_alive)
    if args.command == "sync":
        return sync_tools.sync_all(ctx, cfg)

    print(f"[tas] FAIL: {args.command} -- unhandled command")
    return 2


def main(argv=None, cwd: Optional[str] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _validate(parser, args)
    try:
        return _dispatch(args, cwd)
    except KeyboardInterrupt:
        print("\n[tas] Interrupted.")
        return 130
    except (TasError, OSError) as e:
        print(f"[tas] FAIL: {args.command} -- {describe(e)}")
        return 1
