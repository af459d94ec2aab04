from __future__ import annotations

import subprocess
import sys

import pytest

from tas import companions
from tas.companions import run_r_input, run_tas_view

from conftest import write_file


def test_missing_helpers_are_skipped(tmp_path, monkeypatch):
    monkeypatch.setattr(companions.subprocess, "Popen", lambda *a, **kw: pytest.fail("spawned"))

    assert run_r_input(str(tmp_path / "RInput.exe"), "hl.exe") is None
    assert run_tas_view(str(tmp_path / "TASView")) is None


def test_r_input_gets_game_exe_name(tmp_path, monkeypatch):
    exe = write_file(tmp_path / "RInput.exe")
    calls = []

    def fake_run(argv, **kwargs):
        calls.append(argv)
        return subprocess.CompletedProcess(argv, 0, b"", b"")

    monkeypatch.setattr(companions.subprocess, "run", fake_run)

    out = run_r_input(str(exe), "hl.exe")

    assert calls == [[str(exe), "hl.exe"]]
    assert out.returncode == 0


@pytest.mark.skipif(sys.platform == "win32", reason="moves a real window on Windows")
def test_tas_view_not_started_twice(tmp_path, monkeypatch):
    write_file(tmp_path / "TASView" / "TASView.exe")
    monkeypatch.setattr(companions, "count_processes", lambda name: 1)
    monkeypatch.setattr(companions.subprocess, "Popen", lambda *a, **kw: pytest.fail("spawned"))

    assert run_tas_view(str(tmp_path / "TASView")) is None


@pytest.mark.skipif(sys.platform == "win32", reason="moves a real window on Windows")
def test_tas_view_started_and_awaited(tmp_path, monkeypatch):
    write_file(tmp_path / "TASView" / "TASView.exe")
    started = []
    waited = []
    monkeypatch.setattr(companions, "count_processes", lambda name: 0)
    monkeypatch.setattr(companions, "wait_for_process_start", lambda name, timeout: waited.append(name))
    monkeypatch.setattr(companions.time, "sleep", lambda s: None)
    monkeypatch.setattr(companions.subprocess, "Popen", lambda argv, **kw: started.append(argv) or "handle")

    assert run_tas_view(str(tmp_path / "TASView")) == "handle"
    assert started == [[str(tmp_path / "TASView" / "TASView.exe")]]
    assert waited == ["TASView.exe"]
