"""Logger setup shared by every command."""

import logging
import os
import sys
from typing import Optional

LOG_NAME = "tas"
LOG_FILE_NAME = os.path.join("runtime", "tas_manager.log")


def setup_log(root_dir: Optional[str] = None, debug: bool = False) -> logging.Logger:
    """Configure the ``tas`` logger once.

    Console output goes to stderr at INFO (DEBUG with debug=True).  When a
    root dir is known, everything is also appended to runtime/tas_manager.log.
    """
    log = logging.getLogger(LOG_NAME)
    log.setLevel(logging.DEBUG)
    log.propagate = False

    console = next(
        (h for h in log.handlers
         if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)),
        None,
    )
    if console is None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        log.addHandler(console)
    console.setLevel(logging.DEBUG if debug else logging.INFO)

    if root_dir and not any(isinstance(h, logging.FileHandler) for h in log.handlers):
        log_path = os.path.join(root_dir, LOG_FILE_NAME)
        try:
            os.makedirs(os.path.dirname(log_path), exist_ok=True)
            fh = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            log.warning("Cannot open log file %s: %s", log_path, e)
        else:
            fh.setFormatter(logging.Formatter(
                "%(asctime)s %(levelname)-7s %(message)s",
                datefmt="%H:%M:%S",
            ))
            fh.setLevel(logging.DEBUG)
            log.addHandler(fh)
    return log
