from __future__ import annotations


def configure(ctx) -> None:
    config_dir = ctx.home / ".config" / "hypr"
    if ctx.dry_run:
        ctx.log.info("[DRY RUN] Would create %s", config_dir)
        return
    config_dir.mkdir(parents=True, exist_ok=True)


def post_install(ctx) -> None:
    ctx.log.info("To start Hyprland, run: Hyprland")
    ctx.log.info("Or configure your display manager to use Hyprland")
