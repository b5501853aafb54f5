from __future__ import annotations

import shutil


def post_install(ctx) -> None:
    if shutil.which("git"):
        ctx.log.info("Git is installed and ready")
    elif not ctx.dry_run:
        raise RuntimeError("git not found on PATH after installing base")
