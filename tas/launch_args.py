"""Half-Life command line composition.

Arguments are first built as "flag value" strings, then split on whitespace
into separate argv items.  The order is fixed so identical inputs always give
identical argument lists.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

BASE_ARGS = ("-noforcemparms", "-gl", "+gl_vsync 0")
SIM_CLIENT_ARG = "+bxt_tas_become_simulator_client"
RECORD_ARG = "-noborder sdl_createwindow"
LOAD_SCRIPT_ARG = "+bxt_tas_loadscript"

LOW_QUALITY_ARGS = (
    "-nofbo",
    "-nomsaa",
    "+gl_spriteblend 0",
    "+r_detailtextures 0",
    "-gl_ansio 0",
    "+gl_texturemode GL_Nearest",
    "+gl_round_down 0",
    "+violence_ablood 0",
    "+violence_agibs 0",
    "+violence_hblood 0",
    "+violence_hgibs 0",
)

DEFAULT_SIZE = (1280, 720)
LOW_SIZE = (640, 480)
RECORD_SIZE = (1920, 1080)


@dataclass(frozen=True)
class RunFlags:
    low: bool = False
    record: bool = False
    sim: bool = False
    width: int = DEFAULT_SIZE[0]
    height: int = DEFAULT_SIZE[1]


def default_geometry(low: bool = False, record: bool = False) -> Tuple[int, int]:
    """Window size used when -w/-h are not given.  Record wins over low."""
    if record:
        return RECORD_SIZE
    if low:
        return LOW_SIZE
    return DEFAULT_SIZE


def build_args(
    game: str,
    flags: RunFlags,
    script: Optional[str] = None,
    extra: Iterable[str] = (),
) -> List[str]:
    args: List[str] = list(BASE_ARGS)
    args += ["windowed", f"-w {flags.width}", f"-h {flags.height}"]
    args.append(f"-game {game}")

    if flags.sim:
        args.append(SIM_CLIENT_ARG)
    if flags.low:
        args.extend(LOW_QUALITY_ARGS)
    if flags.record:
        args.append(RECORD_ARG)
    if script:
        args.append(f"{LOAD_SCRIPT_ARG} {script}")
    args.extend(extra)

    return [part for arg in args for part in arg.split()]
