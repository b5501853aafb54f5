from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

from .command import NETWORK_TIMEOUT_S, have_command, run_cmd

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^https?://")
_CONFLICT_MARKER = "existing target is"


def validate_url(url: str) -> None:
    if not _URL_RE.match(url or ""):
        raise ValueError(f"Invalid URL format (must start with http:// or https://): {url}")


def clone_dotfiles(repo_url: str, target_dir: str, branch: str = "main", *, dry_run: bool = False) -> None:
    """Clone the dotfiles repository into target_dir (no-op if present)."""

    validate_url(repo_url)

    target = Path(target_dir)
    if (target / ".git").is_dir():
        logger.info("Dotfiles repository already exists at %s", str(target))
        return

    logger.info("Cloning dotfiles from %s to %s...", repo_url, str(target))
    if dry_run:
        logger.info("[DRY RUN] Would clone dotfiles from %s", repo_url)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    run_cmd(["git", "clone", "-b", branch, repo_url, str(target)], timeout=NETWORK_TIMEOUT_S)
    logger.info("Dotfiles cloned successfully")


def update_dotfiles(target_dir: str, branch: str = "main", *, dry_run: bool = False) -> bool:
    """Fast-forward an existing dotfiles checkout.

    Returns True if new commits were pulled.
    """

    target = Path(target_dir)
    if not (target / ".git").is_dir():
        raise RuntimeError(f"Dotfiles directory is not a git repository: {target_dir}")

    logger.info("Updating dotfiles from remote...")
    if dry_run:
        logger.info("[DRY RUN] Would update dotfiles")
        return False

    run_cmd(["git", "fetch", "origin"], cwd=str(target), timeout=NETWORK_TIMEOUT_S)

    local = run_cmd(["git", "rev-parse", "@"], cwd=str(target)).stdout.strip()
    upstream = run_cmd(["git", "rev-parse", "@{u}"], cwd=str(target), check=False)
    remote = upstream.stdout.strip() if upstream.ok else local

    if local == remote:
        logger.info("Dotfiles are already up to date")
        return False

    run_cmd(["git", "pull", "origin", branch], cwd=str(target), timeout=NETWORK_TIMEOUT_S)
    logger.info("Dotfiles updated successfully")
    return True


def stow_conflicts(output: str) -> List[str]:
    return [line.strip() for line in output.splitlines() if _CONFLICT_MARKER in line]


def link_dotfiles(dotfiles_dir: str, target_dir: str, *, dry_run: bool = False) -> None:
    """Symlink the dotfiles tree into target_dir with GNU stow.

    Raises RuntimeError if stow is missing or reports a failure; stow
    conflicts are listed in the error message.
    """

    src = Path(dotfiles_dir)
    if not src.is_dir():
        raise FileNotFoundError(dotfiles_dir)
    if not have_command("stow"):
        raise RuntimeError("GNU stow is not installed. Please install it first.")

    logger.info("Linking dotfiles from %s to %s...", str(src), target_dir)
    if dry_run:
        logger.info("[DRY RUN] Would link dotfiles using stow")
        return

    r = run_cmd(["stow", "-v", "-d", str(src), "-t", target_dir, "."], cwd=str(src), check=False)
    if r.ok:
        logger.info("Dotfiles linked successfully")
        return

    conflicts = stow_conflicts(r.stdout + "\n" + r.stderr)
    if conflicts:
        for c in conflicts:
            logger.error("stow conflict: %s", c)
        raise RuntimeError(
            f"Stow conflicts detected ({len(conflicts)}); resolve them manually or back up existing files"
        )
    raise RuntimeError(f"Failed to link dotfiles with stow (rc={r.returncode})")
