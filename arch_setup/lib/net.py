from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)

PING_TIMEOUT_S = 15.0


def is_online(host: str = "archlinux.org", *, timeout: float = PING_TIMEOUT_S) -> bool:
    """Best-effort online check (single ping, bounded by timeout)."""

    r = run_cmd(["ping", "-c", "1", "-W", "5", host], check=False, timeout=timeout)
    return r.returncode == 0
