from __future__ import annotations

import logging
from typing import List

from .command import run_cmd, sudo_cmd

logger = logging.getLogger(__name__)


def _systemctl(user: bool) -> List[str]:
    return ["systemctl", "--user"] if user else ["systemctl"]


def _label(user: bool) -> str:
    return "User service" if user else "Service"


def is_service_enabled(service: str, *, user: bool = False) -> bool:
    return run_cmd([*_systemctl(user), "is-enabled", service], check=False).ok


def enable_service(service: str, *, user: bool = False, dry_run: bool = False) -> None:
    """Enable a systemd unit (idempotent). Raises RuntimeError on failure.

    Failure aggregation across a module's units is the engine's job.
    """

    label = _label(user)
    if is_service_enabled(service, user=user):
        logger.info("%s already enabled: %s", label, service)
        return
    if dry_run:
        logger.info("[DRY RUN] Would enable %s: %s", label.lower(), service)
        return

    logger.info("Enabling %s: %s", label.lower(), service)
    argv = [*_systemctl(user), "enable", service]
    if user:
        run_cmd(argv)
    else:
        sudo_cmd(argv)
    logger.info("%s enabled: %s", label, service)
