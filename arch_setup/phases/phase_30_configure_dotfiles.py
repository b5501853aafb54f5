from __future__ import annotations

import logging
from pathlib import Path

from ..config import DEFAULT_DOTFILES_DIR
from ..lib.dotfiles import clone_dotfiles, link_dotfiles, update_dotfiles
from ..pipeline import Session

logger = logging.getLogger(__name__)


class ConfigureDotfilesPhase:
    """Clone/update the dotfiles repository and stow it into $HOME.

    Every failure here is a warning; modules are already installed.
    """

    phase_id = "30_configure_dotfiles"
    title = "Phase 3: Configuration"

    def _warn(self, session: Session, message: str) -> None:
        logger.warning(message)
        session.summary.warnings.append(message)

    def run(self, session: Session) -> None:
        ctx = session.ctx
        cfg = session.config
        if ctx.skip_dotfiles:
            logger.info("Skipping dotfile management (--skip-dotfiles flag)")
            return

        repo = cfg.dotfiles_repo
        if not repo:
            logger.info("No dotfiles repository configured, using module defaults")
            return

        branch = cfg.dotfiles_branch
        target = cfg.get_path("dotfiles.target_dir", DEFAULT_DOTFILES_DIR, home=str(ctx.home))

        try:
            if (Path(target) / ".git").is_dir():
                logger.info("Dotfiles repository exists, updating...")
                update_dotfiles(target, branch, dry_run=ctx.dry_run)
            else:
                logger.info("Cloning dotfiles repository...")
                clone_dotfiles(repo, target, branch, dry_run=ctx.dry_run)
        except (RuntimeError, ValueError, OSError) as e:
            self._warn(session, f"Failed to fetch dotfiles: {e}")

        if not Path(target).is_dir():
            return

        try:
            link_dotfiles(target, str(ctx.home), dry_run=ctx.dry_run)
        except (RuntimeError, OSError) as e:
            self._warn(session, f"Failed to link dotfiles: {e}")
