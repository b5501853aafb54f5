from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def confirm(
    message: str,
    default: bool = False,
    *,
    no_confirm: bool = False,
    input_fn: Callable[[str], str] = input,
) -> bool:
    """Ask a yes/no question on the terminal.

    An empty answer (or EOF) takes the default. With no_confirm the answer
    is always yes.
    """

    if no_confirm:
        logger.info("Auto-confirming: %s", message)
        return True

    prompt = f"{message} [Y/n]: " if default else f"{message} [y/N]: "
    while True:
        try:
            reply = input_fn(prompt).strip().lower()
        except EOFError:
            return default
        if not reply:
            return default
        if reply in {"y", "yes"}:
            return True
        if reply in {"n", "no"}:
            return False
        print("Please answer y or n.")
