from __future__ import annotations


def post_install(ctx) -> None:
    ctx.log.info("Waybar will be started automatically by Hyprland")
