from __future__ import annotations

import sys

import pytest

from arch_setup.lib.command import run_cmd


def test_dry_run_does_not_execute(tmp_path):
    marker = tmp_path / "ran"
    r = run_cmd([sys.executable, "-c", f"open({str(marker)!r}, 'w')"], dry_run=True)
    assert r.ok
    assert not marker.exists()


def test_captures_output():
    r = run_cmd([sys.executable, "-c", "print('hello')"])
    assert r.ok
    assert r.stdout.strip() == "hello"


def test_nonzero_exit_raises_when_checked():
    with pytest.raises(RuntimeError, match="Command failed"):
        run_cmd([sys.executable, "-c", "raise SystemExit(3)"])


def test_nonzero_exit_returned_when_unchecked():
    r = run_cmd([sys.executable, "-c", "raise SystemExit(3)"], check=False)
    assert r.returncode == 3
    assert not r.ok


def test_missing_executable():
    r = run_cmd(["definitely-not-a-real-command-xyz"], check=False)
    assert r.returncode == 127
    with pytest.raises(RuntimeError, match="Command not found"):
        run_cmd(["definitely-not-a-real-command-xyz"])


def test_timeout():
    argv = [sys.executable, "-c", "import time; time.sleep(10)"]
    r = run_cmd(argv, check=False, timeout=0.2)
    assert r.returncode == 124
    with pytest.raises(RuntimeError, match="timed out"):
        run_cmd(argv, timeout=0.2)
