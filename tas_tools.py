"""TAS practice environment tools.

Run from the root directory (next to tas_manager.json) or from inside a
project directory (next to project.json):

    python tas_tools.py games
    python tas_tools.py run-game --sim
    python tas_tools.py run-game --instances 4 --keep-alive
    python tas_tools.py run-game --low -- +map c1a0
    python tas_tools.py link-hltas --keep-alive
    python tas_tools.py sync-saves
    python tas_tools.py sync
"""
import sys

from tools.cli import main

if __name__ == "__main__":
    sys.exit(main())
