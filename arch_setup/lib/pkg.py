from __future__ import annotations

import logging
import shutil
import tempfile
import time
from typing import List, Sequence

from .command import NETWORK_TIMEOUT_S, have_command, run_cmd, sudo_cmd

logger = logging.getLogger(__name__)

PARU_REPO = "https://aur.archlinux.org/paru.git"
AUR_MAX_RETRIES = 2
AUR_RETRY_DELAY_S = 2.0


def is_installed(package: str) -> bool:
    """Return True if pacman reports the package as installed."""

    r = run_cmd(["pacman", "-Qi", package], check=False)
    return r.returncode == 0


def _missing(packages: Sequence[str]) -> List[str]:
    return [p for p in packages if not is_installed(p)]


def refresh_databases(*, dry_run: bool = False) -> None:
    logger.info("Refreshing package databases...")
    sudo_cmd(["pacman", "-Sy"], dry_run=dry_run)
    logger.info("Package databases refreshed")


def update_system(*, dry_run: bool = False) -> None:
    """Full system upgrade; failures are logged, never raised."""

    logger.info("Updating system packages...")
    r = sudo_cmd(["pacman", "-Syu", "--noconfirm"], check=False, dry_run=dry_run)
    if r.ok:
        logger.info("System updated successfully")
    else:
        logger.warning("System update completed with warnings (rc=%s)", r.returncode)


def install_official_packages(
    packages: Sequence[str],
    *,
    force: bool = False,
    dry_run: bool = False,
) -> List[str]:
    """Install repository packages via pacman, skipping installed ones.

    Returns the packages that were (or, in dry-run, would be) installed.
    Raises RuntimeError if pacman fails.
    """

    if not packages:
        return []

    to_install = list(packages) if force else _missing(packages)
    if not to_install:
        logger.info("All official packages already installed")
        return []

    logger.info("Installing official packages: %s", " ".join(to_install))
    if dry_run:
        logger.info("[DRY RUN] Would install: %s", " ".join(to_install))
        return to_install

    argv = ["pacman", "-S", "--noconfirm"]
    if not force:
        argv.append("--needed")
    sudo_cmd([*argv, *to_install])
    logger.info("Official packages installed successfully")
    return to_install


def ensure_paru(*, dry_run: bool = False) -> None:
    """Bootstrap the paru AUR helper from source if it is missing."""

    if have_command("paru"):
        logger.info("Paru is already installed")
        return

    logger.info("Paru not found, installing from AUR...")
    if dry_run:
        logger.info("[DRY RUN] Would install paru from AUR")
        return

    if not is_installed("base-devel"):
        logger.info("Installing base-devel (required for AUR builds)...")
        sudo_cmd(["pacman", "-S", "--needed", "--noconfirm", "base-devel"])

    build_dir = tempfile.mkdtemp(prefix="paru-build-")
    try:
        logger.info("Cloning paru repository...")
        run_cmd(["git", "clone", PARU_REPO, build_dir], timeout=NETWORK_TIMEOUT_S)
        logger.info("Building paru...")
        run_cmd(["makepkg", "-si", "--noconfirm"], cwd=build_dir)
    finally:
        shutil.rmtree(build_dir, ignore_errors=True)
    logger.info("Paru installed successfully")


def install_aur_packages(
    packages: Sequence[str],
    *,
    force: bool = False,
    dry_run: bool = False,
    retries: int = AUR_MAX_RETRIES,
    retry_delay: float = AUR_RETRY_DELAY_S,
) -> List[str]:
    """Install AUR packages via paru with bounded retries.

    Raises RuntimeError once all attempts have failed.
    """

    if not packages:
        return []

    ensure_paru(dry_run=dry_run)

    to_install = list(packages) if force else _missing(packages)
    if not to_install:
        logger.info("All AUR packages already installed")
        return []

    logger.info("Installing AUR packages: %s", " ".join(to_install))
    if dry_run:
        logger.info("[DRY RUN] Would install AUR packages: %s", " ".join(to_install))
        return to_install

    argv = ["paru", "-S", "--noconfirm"]
    if not force:
        argv.append("--needed")

    for attempt in range(retries + 1):
        if attempt > 0:
            logger.warning("Retry attempt %d/%d...", attempt, retries)
            time.sleep(retry_delay)
        r = run_cmd([*argv, *to_install], check=False)
        if r.ok:
            logger.info("AUR packages installed successfully")
            return to_install

    raise RuntimeError(f"Failed to install AUR packages after {retries} retries: {' '.join(to_install)}")
