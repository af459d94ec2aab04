"""Exception taxonomy for the TAS manager.

Every error raised on purpose derives from TasError so the CLI can print a
single ``[tas] FAIL`` line for it.  Underlying OS errors are chained with
``raise ... from exc`` and rendered by describe().
"""


class TasError(Exception):
    """Base class for all expected failures."""


class ConfigError(TasError):
    """tas_manager.json / project.json missing, unreadable or malformed."""


class PathResolutionError(TasError):
    """The project / root context cannot be determined from the cwd."""


class GameDirError(TasError, OSError):
    """A game root cannot be listed or a game directory cannot be created."""


class LaunchError(TasError):
    pass


class ExecutableMissing(LaunchError):
    def __init__(self, path: str):
        super().__init__(f"executable not found: {path}")
        self.path = path


class SpawnFailed(LaunchError):
    def __init__(self, path: str, cause: OSError):
        super().__init__(f"failed to start {path}: {cause}")
        self.path = path
        self.cause = cause


class LinkError(TasError):
    pass


class MissingSource(LinkError):
    def __init__(self, path: str):
        super().__init__(f"source file does not exist: {path}")
        self.path = path


class SyncError(TasError):
    def __init__(self, message: str, game: str = "", file_name: str = ""):
        super().__init__(message)
        self.game = game
        self.file_name = file_name


class DirCreateFailed(SyncError):
    pass


class CopyFailed(SyncError):
    pass


def describe(exc: BaseException) -> str:
    """Render an exception and its causes as ``what -- why -- why``."""
    parts = []
    seen = set()
    cur = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        text = str(cur) or type(cur).__name__
        if text not in parts:
            parts.append(text)
        cur = cur.__cause__
    return " -- ".join(parts)
