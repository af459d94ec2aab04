"""Helper programs started next to a single game run.

RInput fixes raw mouse input for the running hl.exe; TASView shows the
TAS input overlay.  Both are optional: if the executable is missing the
helper is skipped without error.
"""

import logging
import os
import subprocess
import sys
import time
from typing import Optional

from tas.errors import SpawnFailed
from tas.supervisor import ProcessOutput, count_processes, wait_for_process_start

log = logging.getLogger("tas.companions")

TAS_VIEW_EXE = "TASView.exe"
TAS_VIEW_TITLE = "TASView"
TAS_VIEW_POS = (-8, 350)
TAS_VIEW_START_TIMEOUT = 5.0


def run_r_input(r_input_exe: str, game_exe_name: str) -> Optional[ProcessOutput]:
    if not os.path.isfile(r_input_exe):
        log.debug("RInput not found at %s, skipping", r_input_exe)
        return None
    log.info("Running RInput...")
    try:
        proc = subprocess.run([r_input_exe, game_exe_name], capture_output=True, check=False)
    except OSError as e:
        raise SpawnFailed(r_input_exe, e) from e
    return ProcessOutput(pid=0, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def run_tas_view(tas_view_dir: str) -> Optional[subprocess.Popen]:
    """Start TASView unless it already runs, then park its window."""
    exe = os.path.join(tas_view_dir, TAS_VIEW_EXE)
    if not os.path.isfile(exe):
        log.debug("TASView not found at %s, skipping", exe)
        return None

    handle = None
    if count_processes(TAS_VIEW_EXE) == 0:
        log.info("Starting TASView...")
        try:
            handle = subprocess.Popen(
                [exe],
                cwd=tas_view_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise SpawnFailed(exe, e) from e
        wait_for_process_start(TAS_VIEW_EXE, TAS_VIEW_START_TIMEOUT)
        time.sleep(0.1)

    if sys.platform == "win32":
        from tas.window_utils import move_window_to_pos

        if not move_window_to_pos(TAS_VIEW_POS[0], TAS_VIEW_POS[1], TAS_VIEW_TITLE):
            log.warning("TASView window not found, leaving it where it is")
    return handle
