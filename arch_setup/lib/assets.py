from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def apply_defaults(src: str, dst: str, *, dry_run: bool = False) -> List[str]:
    """Copy a module's default configs into dst without overwriting.

    Files that already exist under dst are left untouched, so applying the
    same defaults twice is a no-op. Returns the files copied.
    """

    s = Path(src)
    d = Path(dst)
    if not s.is_dir():
        raise FileNotFoundError(src)

    copied: List[str] = []
    skipped = 0

    for item in sorted(s.rglob("*")):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_dir():
            if not dry_run:
                out.mkdir(parents=True, exist_ok=True)
            continue
        if out.exists() or out.is_symlink():
            logger.debug("Keeping existing %s", str(out))
            skipped += 1
            continue
        if dry_run:
            logger.info("[DRY RUN] Would copy %s -> %s", str(item), str(out))
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
        copied.append(str(out))

    logger.info("Default configs applied from %s (%d copied, %d kept)", str(s), len(copied), skipped)
    return copied
