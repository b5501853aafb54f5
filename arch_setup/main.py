from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .adapters import Adapters, SystemAdapters
from .config import ConfigStore, load_config, split_modules_arg
from .context import Paths, RunContext, RunSummary
from .descriptor import ModuleCatalog
from .engine import Engine
from .errors import SetupCancelled, SetupError
from .logging_utils import configure_logging
from .phases import CompletePhase, ConfigureDotfilesPhase, InitializePhase, InstallModulesPhase
from .pipeline import Session, run_pipeline

logger = logging.getLogger(__name__)

EPILOG = """\
Examples:
    arch-setup                          # Full installation
    arch-setup --dry-run                # Preview what would be installed
    arch-setup --modules base,hyprland  # Install only specific modules
    arch-setup --no-confirm             # Non-interactive mode
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_phases():
    return [
        InitializePhase(),
        InstallModulesPhase(),
        ConfigureDotfilesPhase(),
        CompletePhase(),
    ]


def build_session(ctx: RunContext, config: ConfigStore, adapters: Optional[Adapters] = None) -> Session:
    adapters = adapters or SystemAdapters(ctx)
    catalog = ModuleCatalog(ctx.paths.modules_path, ctx=ctx, config=config)
    engine = Engine(load=catalog.load, adapters=adapters, config=config, ctx=ctx)
    return Session(ctx=ctx, config=config, adapters=adapters, engine=engine)


def run(ctx: RunContext) -> RunSummary:
    """Load configuration and run every installer phase.

    Raises ConfigNotFound before any module work if the config file is
    missing, SetupCancelled if a confirmation gate is declined, and the
    other SetupError kinds on fatal failure.
    """

    config = load_config(str(ctx.paths.config_path))

    log_path = configure_logging(
        log_dir=config.log_dir if config.log_to_file else None,
        level=logging.DEBUG if ctx.verbose else logging.INFO,
    )
    logger.info("Loaded configuration from %s (%d keys)", config.source, len(config.values))

    session = build_session(ctx, config)
    session.summary.log_path = log_path

    logger.info("Arch Linux Setup Framework: starting setup process...")
    result = run_pipeline(session=session, phases=build_phases())
    return result.summary


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="arch-setup",
        description="Modular installation framework for Arch Linux",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--dry-run", action="store_true", help="Show what would be done without making changes")
    p.add_argument(
        "--modules",
        default=None,
        metavar="MODULE1,MODULE2",
        help="Install only specified modules (comma-separated)",
    )
    p.add_argument("--skip-dotfiles", action="store_true", help="Skip dotfile cloning and symlinking")
    p.add_argument("--no-confirm", action="store_true", help="Skip all confirmation prompts (automatic yes)")
    p.add_argument("--force", action="store_true", help="Force reinstall even if packages are already installed")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging output")
    p.add_argument("--config", default=None, help="Path to config.toml (default: <repo>/config/config.toml)")
    p.add_argument("--modules-dir", default=None, help="Module catalog directory (default: <repo>/modules)")
    return p


def context_from_args(args: argparse.Namespace) -> RunContext:
    paths = Paths(
        config_file=Path(args.config) if args.config else None,
        modules_dir=Path(args.modules_dir) if args.modules_dir else None,
    )
    return RunContext(
        dry_run=bool(args.dry_run),
        force=bool(args.force),
        no_confirm=bool(args.no_confirm),
        skip_dotfiles=bool(args.skip_dotfiles),
        verbose=bool(args.verbose),
        modules=split_modules_arg(args.modules),
        paths=paths,
    )


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    ctx = context_from_args(args)
    try:
        run(ctx)
    except SetupCancelled as e:
        logger.info("Setup cancelled by user (%s)", e)
        return 0
    except SetupError as e:
        if not logging.getLogger().handlers:
            configure_logging(log_dir=None)
        where = f" [module: {e.module}]" if e.module else ""
        logger.error("%s: %s%s", e.kind, e, where)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
