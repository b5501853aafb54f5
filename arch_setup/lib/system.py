from __future__ import annotations

import logging
from pathlib import Path

from ..errors import PreflightError
from .command import have_command, sudo_cmd
from .net import is_online

logger = logging.getLogger(__name__)

ARCH_RELEASE = "/etc/arch-release"


def check_arch(release_file: str = ARCH_RELEASE) -> None:
    if not Path(release_file).is_file():
        raise PreflightError("This installer is designed for Arch Linux only")


def ensure_git(*, dry_run: bool = False) -> None:
    if have_command("git"):
        logger.info("Git is already installed")
        return

    logger.info("Git not found, installing...")
    try:
        sudo_cmd(["pacman", "-S", "--needed", "--noconfirm", "git"], dry_run=dry_run)
    except RuntimeError as e:
        raise PreflightError(f"Failed to install git: {e}") from e
    logger.info("Git installed successfully")


def check_internet(host: str = "archlinux.org") -> None:
    logger.info("Checking internet connectivity...")
    if not is_online(host):
        raise PreflightError(f"No internet connection detected (cannot reach {host})")
    logger.info("Internet connection OK")
