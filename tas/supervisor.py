"""Game instance launching and keep-alive supervision.

Instances are never tracked one by one.  The supervisor only compares how
many game processes are alive against how many it was asked to keep up and
starts the difference.  Launches are strictly sequential with a settle pause
because the engine misbehaves when several copies start at once.

Two ways to count live instances are available:

  ProcessNameCounter  -- process table lookup by executable name.  Needed
                         when the injector starts the game, since the game
                         PID is never handed back to us.
  SpawnedPidCounter   -- counts the PIDs of detached launches that are still
                         running.
"""

import logging
import os
import subprocess
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

import psutil

from tas.errors import ExecutableMissing, LaunchError, SpawnFailed

log = logging.getLogger("tas.supervisor")

SETTLE_SECONDS = 6.0
POLL_SECONDS = 5.0
SCRIPT_ENV_VAR = "BXT_SCRIPT"


@dataclass(frozen=True)
class LaunchSpec:
    game_exe_path: str
    working_dir: str
    args: Tuple[str, ...] = ()
    use_injector: bool = False
    injector_path: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=dict)
    detached: bool = False

    def command(self) -> List[str]:
        if self.use_injector:
            return [self.injector_path or "", self.game_exe_path, *self.args]
        return [self.game_exe_path, *self.args]

    @property
    def exe_name(self) -> str:
        return os.path.basename(self.game_exe_path)


@dataclass
class ProcessOutput:
    pid: int
    returncode: Optional[int] = None
    stdout: bytes = b""
    stderr: bytes = b""


def detach_kwargs() -> Dict[str, object]:
    """Popen options that keep a Ctrl+C in our console away from the child."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def check_executables(spec: LaunchSpec) -> None:
    if spec.use_injector and not (spec.injector_path and os.path.isfile(spec.injector_path)):
        raise ExecutableMissing(spec.injector_path or "<injector not configured>")
    if not os.path.isfile(spec.game_exe_path):
        raise ExecutableMissing(spec.game_exe_path)


def launch_once(spec: LaunchSpec) -> ProcessOutput:
    """Start one process for spec.

    Detached launches run in their own session (process group on Windows)
    and return as soon as the OS hands back a process; the
    others wait for exit and capture output (the injector exits right after
    it has started the game).
    """
    check_executables(spec)
    argv = spec.command()
    env = None
    if spec.env:
        env = dict(os.environ)
        env.update(spec.env)

    log.debug("Launching %s (cwd=%s)", argv, spec.working_dir)
    try:
        if spec.detached:
            proc = subprocess.Popen(
                argv,
                cwd=spec.working_dir,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                **detach_kwargs(),
            )
            return ProcessOutput(pid=proc.pid)
        proc = subprocess.Popen(
            argv,
            cwd=spec.working_dir,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        out, err = proc.communicate()
    except OSError as e:
        raise SpawnFailed(argv[0], e) from e
    return ProcessOutput(pid=proc.pid, returncode=proc.returncode, stdout=out or b"", stderr=err or b"")


# ---------------------------------------------------------------------------
# Instance counting
# ---------------------------------------------------------------------------

def count_processes(exe_name: str) -> int:
    """Return how many running processes are named exe_name (case-insensitive)."""
    target = exe_name.lower()
    count = 0
    for proc in psutil.process_iter(["name"]):
        try:
            if (proc.info.get("name") or "").lower() == target:
                count += 1
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return count


class ProcessNameCounter:
    def __init__(self, exe_name: str):
        self.exe_name = exe_name

    def track(self, output: ProcessOutput) -> None:
        pass

    def count(self) -> int:
        return count_processes(self.exe_name)


class SpawnedPidCounter:
    def __init__(self) -> None:
        self.pids: Set[int] = set()

    def track(self, output: ProcessOutput) -> None:
        self.pids.add(output.pid)

    def _alive(self, pid: int) -> bool:
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            return psutil.pid_exists(pid)

    def count(self) -> int:
        self.pids = {pid for pid in self.pids if self._alive(pid)}
        return len(self.pids)


def counter_for(spec: LaunchSpec):
    if spec.use_injector or not spec.detached:
        return ProcessNameCounter(spec.exe_name)
    return SpawnedPidCounter()


def wait_for_process_start(exe_name: str, timeout: float, poll: float = 0.1) -> None:
    deadline = time.monotonic() + timeout
    while count_processes(exe_name) == 0:
        if time.monotonic() >= deadline:
            raise LaunchError(f"{exe_name} did not start within {timeout:g}s")
        time.sleep(poll)


# ---------------------------------------------------------------------------
# Supervision
# ---------------------------------------------------------------------------

Launcher = Callable[[LaunchSpec], ProcessOutput]


def _launch_batch(
    spec: LaunchSpec,
    total: int,
    counter,
    launch: Launcher,
    stop: threading.Event,
    settle_seconds: float,
) -> int:
    """Start total instances one after another.  Returns how many started."""
    started = 0
    for i in range(total):
        if stop.is_set():
            break
        try:
            output = launch(spec)
        except LaunchError as e:
            log.error("Failed to launch %d out of %d games: %s", i + 1, total, e)
        else:
            counter.track(output)
            started += 1
            log.info("Successfully launched %d out of %d games", i + 1, total)
        if stop.wait(settle_seconds):
            break
    return started


def launch_many(
    spec: LaunchSpec,
    target: int,
    keep_alive: bool = False,
    *,
    counter=None,
    launch: Launcher = launch_once,
    stop: Optional[threading.Event] = None,
    settle_seconds: float = SETTLE_SECONDS,
    poll_seconds: float = POLL_SECONDS,
) -> int:
    """Launch target instances and, with keep_alive, keep that many running.

    Returns the total number of successful launches once the stop event is
    set (keep_alive) or after the first batch.  A missing executable is
    fatal; a failed individual launch is logged and retried on a later poll.
    """
    if target < 1:
        raise ValueError("target must be at least 1")
    check_executables(spec)

    stop = stop or threading.Event()
    counter = counter or counter_for(spec)
    baseline = counter.count()
    expected = baseline + target
    log.debug("Baseline %s count: %d, expecting %d", spec.exe_name, baseline, expected)

    started = _launch_batch(spec, target, counter, launch, stop, settle_seconds)
    if not keep_alive:
        return started

    while not stop.is_set():
        actual = counter.count()
        if actual < expected:
            missing = expected - actual
            log.warning("Missing %d games, starting up new ones", missing)
            started += _launch_batch(spec, missing, counter, launch, stop, settle_seconds)
        if stop.wait(poll_seconds):
            break
    return started


def env_with_script(script: Optional[str]) -> Dict[str, str]:
    return {SCRIPT_ENV_VAR: script} if script else {}
