from __future__ import annotations

import logging

from ..pipeline import Session

logger = logging.getLogger(__name__)


class CompletePhase:
    phase_id = "40_complete"
    title = "Setup Complete!"

    def run(self, session: Session) -> None:
        summary = session.summary
        if summary.warnings:
            logger.warning("Completed with %d warning(s):", len(summary.warnings))
            for w in summary.warnings:
                logger.warning("  - %s", w)
        else:
            logger.info("All modules installed successfully")

        logger.info("Installed modules: %s", " ".join(summary.processed) or "(none)")
        if summary.log_path:
            logger.info("Log file: %s", summary.log_path)

        logger.info("Next steps:")
        logger.info("  - Review your configurations in ~/.config/")
        logger.info("  - Customize your dotfiles repository")
        logger.info("  - Add more modules by copying modules/example-module/")
        logger.info("  - Reboot or start your window manager")
