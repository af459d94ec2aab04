"""Game listing command for tas_tools."""

from typing import Any, Dict

from tas.config import RunConfig
from tas.games import classify


def games_list(cfg: RunConfig) -> Dict[str, Any]:
    entries = [e for e in classify(cfg.half_life_dir) if e.name not in cfg.ignore_games]
    return {
        "half_life_dir": cfg.half_life_dir,
        "games": sorted(entries, key=lambda e: e.name.lower()),
    }


def print_games(data: Dict[str, Any]) -> int:
    games = data["games"]
    if not games:
        print(f"[tas] FAIL: games -- no games found in {data['half_life_dir']}")
        return 1
    for entry in games:
        variants = [v for v, on in (("hd", entry.has_hd), ("addon", entry.has_addon)) if on]
        suffix = f"  ({', '.join(variants)})" if variants else ""
        print(f"{entry.name}{suffix}")
    return 0
