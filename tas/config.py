"""Config loading for the TAS manager.

Two JSON files are read, both written by the install / project scaffolding
commands which live outside this tool:

  <root>/tas_manager.json      -> RunConfig
  <root>/<projects>/<name>/project.json -> ProjectMeta

Missing keys fall back to the defaults below.  Relative paths are resolved
against the root directory so every consumer gets absolute paths.
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

from tas.errors import ConfigError

CONFIG_FILE_NAME = "tas_manager.json"
PROJECT_FILE_NAME = "project.json"

DEFAULT_GAME = "valve"
DEFAULT_SAVE_DIR_NAME = "SAVE"

_DEFAULTS: Dict[str, Any] = {
    "half_life_dir": "Half-Life",
    "no_client_dll_dir": None,
    "save_dir_name": DEFAULT_SAVE_DIR_NAME,
    "ignore_games": [".bxt-ipc"],
    "project_dir": "tas",
    "cfgs_dir": "cfgs",
    "game_exe": "hl.exe",
    "injector_exe": os.path.join("Bunnymod XT", "Injector.exe"),
    "r_input_exe": os.path.join("RInput", "RInput.exe"),
    "tas_view_dir": "TASView",
}


@dataclass(frozen=True)
class RunConfig:
    root_dir: str
    half_life_dir: str
    no_client_dll_dir: Optional[str]
    save_dir_name: str
    ignore_games: FrozenSet[str]
    project_dir: str
    cfgs_dir: Optional[str]
    game_exe: str
    injector_exe: str
    r_input_exe: str
    tas_view_dir: str

    @property
    def has_mirror(self) -> bool:
        return self.no_client_dll_dir is not None


@dataclass(frozen=True)
class ProjectMeta:
    game: str


def _read_json(path: str, what: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"{what} not found: {path}") from e
    except (OSError, ValueError) as e:
        raise ConfigError(f"failed to load {what}: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{what} must be a JSON object: {path}")
    return data


def _opt_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key, _DEFAULTS[key])
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"config key '{key}' must be a string, got {type(value).__name__}")
    return value


def _str(data: dict, key: str) -> str:
    value = _opt_str(data, key)
    if value is None:
        raise ConfigError(f"config key '{key}' must not be empty")
    return value


def _under(root_dir: str, path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    return os.path.normpath(path if os.path.isabs(path) else os.path.join(root_dir, path))


def parse_config(data: dict, root_dir: str) -> RunConfig:
    """Build a RunConfig from already-decoded JSON."""
    ignore = data.get("ignore_games", _DEFAULTS["ignore_games"])
    if not isinstance(ignore, list) or not all(isinstance(g, str) for g in ignore):
        raise ConfigError("config key 'ignore_games' must be a list of strings")

    root_dir = os.path.abspath(root_dir)
    return RunConfig(
        root_dir=root_dir,
        half_life_dir=_under(root_dir, _str(data, "half_life_dir")),
        no_client_dll_dir=_under(root_dir, _opt_str(data, "no_client_dll_dir")),
        save_dir_name=_str(data, "save_dir_name"),
        ignore_games=frozenset(ignore),
        project_dir=_under(root_dir, _str(data, "project_dir")),
        cfgs_dir=_under(root_dir, _opt_str(data, "cfgs_dir")),
        game_exe=_str(data, "game_exe"),
        injector_exe=_under(root_dir, _str(data, "injector_exe")),
        r_input_exe=_under(root_dir, _str(data, "r_input_exe")),
        tas_view_dir=_under(root_dir, _str(data, "tas_view_dir")),
    )


def load_config(root_dir: str) -> RunConfig:
    return parse_config(_read_json(os.path.join(root_dir, CONFIG_FILE_NAME), "config"), root_dir)


def load_project(project_dir: str) -> ProjectMeta:
    data = _read_json(os.path.join(project_dir, PROJECT_FILE_NAME), "project config")
    game = data.get("game", DEFAULT_GAME)
    if not isinstance(game, str) or not game:
        raise ConfigError("project config key 'game' must be a non-empty string")
    return ProjectMeta(game=game)
