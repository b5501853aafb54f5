from __future__ import annotations

import logging

from ..lib.system import check_arch, check_internet, ensure_git
from ..pipeline import Session

logger = logging.getLogger(__name__)


class InitializePhase:
    phase_id = "10_initialize"
    title = "Phase 1: Initialization"

    def run(self, session: Session) -> None:
        ctx = session.ctx
        if ctx.dry_run:
            logger.warning("DRY RUN MODE - No changes will be made")

        check_arch()
        ensure_git(dry_run=ctx.dry_run)
        check_internet(session.config.network_check_host)

        session.gate("Proceed with setup?")
