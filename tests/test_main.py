from __future__ import annotations

import logging

import pytest

from arch_setup import main as main_mod
from arch_setup.phases import phase_10_initialize, phase_20_install_modules

from .conftest import RecordingAdapters


@pytest.fixture
def offline_system(monkeypatch):
    """Replace preflight checks and the package database refresh."""

    calls = []
    monkeypatch.setattr(phase_10_initialize, "check_arch", lambda: calls.append("check_arch"))
    monkeypatch.setattr(phase_10_initialize, "ensure_git", lambda **kw: calls.append("ensure_git"))
    monkeypatch.setattr(phase_10_initialize, "check_internet", lambda host: calls.append(("ping", host)))
    monkeypatch.setattr(phase_20_install_modules, "refresh_databases", lambda **kw: calls.append("refresh"))
    monkeypatch.setattr(phase_20_install_modules, "update_system", lambda **kw: calls.append("update"))
    return calls


@pytest.fixture
def recording(monkeypatch):
    adapters = RecordingAdapters()
    monkeypatch.setattr(main_mod, "SystemAdapters", lambda ctx: adapters)
    return adapters


@pytest.fixture
def config_file(tmp_path):
    p = tmp_path / "config.toml"
    p.write_text(
        "[modules]\n"
        'enabled = ["bar"]\n'
        "[logging]\n"
        "log_to_file = false\n",
        encoding="utf-8",
    )
    return p


def argv_for(config_file, modules_dir, *extra):
    return ["--config", str(config_file), "--modules-dir", str(modules_dir), *extra]


def test_help_exits_zero(capsys):
    assert main_mod.main(["--help"]) == 0
    assert "--dry-run" in capsys.readouterr().out


def test_unknown_flag_exits_one(capsys):
    assert main_mod.main(["--bogus"]) == 1
    assert "unrecognized arguments" in capsys.readouterr().err


def test_missing_config_exits_one(tmp_path, recording, offline_system):
    rc = main_mod.main(["--config", str(tmp_path / "missing.toml")])
    assert rc == 1
    assert offline_system == []
    assert recording.calls == []


def test_full_run_processes_enabled_modules(config_file, make_module, modules_dir, recording, offline_system):
    make_module("base", official=["git"])
    make_module("wm", requires=["base"], official=["hyprland"])
    make_module("bar", requires=["base", "wm"], official=["waybar"])

    rc = main_mod.main(argv_for(config_file, modules_dir, "--no-confirm"))

    assert rc == 0
    assert recording.kinds("official") == [("git",), ("hyprland",), ("waybar",)]
    assert offline_system == ["check_arch", "ensure_git", ("ping", "archlinux.org"), "refresh"]


def test_modules_flag_overrides_config(config_file, make_module, modules_dir, recording, offline_system):
    make_module("bar", official=["waybar"])
    make_module("solo", official=["htop"])

    rc = main_mod.main(argv_for(config_file, modules_dir, "--modules", "solo"))

    assert rc == 0
    assert recording.kinds("official") == [("htop",)]


def test_official_failure_exits_one(config_file, make_module, modules_dir, recording, offline_system):
    make_module("bar", official=["broken"])
    recording.fail_official.add("broken")

    assert main_mod.main(argv_for(config_file, modules_dir)) == 1


def test_secondary_failure_still_succeeds(config_file, make_module, modules_dir, recording, offline_system):
    make_module("bar", official=["waybar"], aur=["flaky"])
    recording.fail_secondary.add("flaky")

    assert main_mod.main(argv_for(config_file, modules_dir)) == 0


def test_declined_gate_cancels_before_modules(config_file, make_module, modules_dir, recording, offline_system):
    make_module("bar", official=["waybar"])
    recording.answers = [False]

    rc = main_mod.main(argv_for(config_file, modules_dir))

    assert rc == 0
    assert recording.kinds("official") == []
    assert "refresh" not in offline_system


def test_run_returns_summary(config_file, make_module, modules_dir, recording, offline_system, home):
    make_module("bar", official=["waybar"], services=["svc"])
    recording.fail_services.add("svc")
    ctx = main_mod.context_from_args(main_mod.build_parser().parse_args(argv_for(config_file, modules_dir)))

    summary = main_mod.run(ctx)

    assert summary.requested == ["bar"]
    assert summary.processed == ["bar"]
    assert len(summary.warnings) == 1


def test_context_from_args_flags():
    args = main_mod.build_parser().parse_args(
        ["--dry-run", "--force", "--no-confirm", "--skip-dotfiles", "--verbose", "--modules", "a,b"]
    )
    ctx = main_mod.context_from_args(args)
    assert (ctx.dry_run, ctx.force, ctx.no_confirm, ctx.skip_dotfiles, ctx.verbose) == (True,) * 5
    assert ctx.modules == ("a", "b")


class _EventHandler(logging.Handler):
    def __init__(self, events) -> None:
        super().__init__()
        self.events = events

    def emit(self, record: logging.LogRecord) -> None:
        self.events.append(record.getMessage())


def test_config_load_is_logged_after_logging_is_configured(
    config_file, make_module, modules_dir, recording, offline_system, monkeypatch, caplog
):
    make_module("bar")
    events = []
    handler = _EventHandler(events)
    main_mod.logger.addHandler(handler)
    caplog.set_level(logging.INFO)
    monkeypatch.setattr(main_mod, "configure_logging", lambda **kw: events.append("configured"))
    ctx = main_mod.context_from_args(main_mod.build_parser().parse_args(argv_for(config_file, modules_dir)))

    try:
        main_mod.run(ctx)
    finally:
        main_mod.logger.removeHandler(handler)

    loaded = [i for i, e in enumerate(events) if e.startswith("Loaded configuration from")]
    assert loaded and events.index("configured") < loaded[0]
    assert str(config_file) in events[loaded[0]]
