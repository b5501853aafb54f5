from __future__ import annotations

import logging

from ..engine import requested_modules
from ..errors import PreflightError
from ..lib.pkg import refresh_databases, update_system
from ..pipeline import Session

logger = logging.getLogger(__name__)


class InstallModulesPhase:
    phase_id = "20_install_modules"
    title = "Phase 2: Package Installation"

    def run(self, session: Session) -> None:
        ctx = session.ctx
        try:
            refresh_databases(dry_run=ctx.dry_run)
        except RuntimeError as e:
            raise PreflightError(f"Failed to refresh package databases: {e}") from e

        if session.config.update_system:
            update_system(dry_run=ctx.dry_run)

        modules = list(requested_modules(ctx, session.config))
        source = "filtered" if ctx.modules else "enabled"
        logger.info("Installing %s modules: %s", source, " ".join(modules))
        session.summary.requested = modules

        try:
            result = session.engine.run(modules)
        finally:
            session.summary.processed = list(session.engine.processed)
            session.summary.warnings = [w.message for w in session.engine.warnings]

        logger.info("Processed modules: %s", " ".join(result.processed))
        session.gate("Package installation complete. Proceed with configuration?")
