"""Optional hooks for the example module.

Each hook receives a ModuleContext (name, module_dir, run flags, config,
home, log). Delete the hooks you don't need; a raised exception is logged
as a warning and the module carries on.
"""

from __future__ import annotations


def install(ctx) -> None:
    # Runs after packages are installed, before default configs.
    ctx.log.info("Installing %s...", ctx.name)


def configure(ctx) -> None:
    # Runs after default configs are applied.
    ctx.log.info("Configuring %s...", ctx.name)


def post_install(ctx) -> None:
    ctx.log.info("%s installed successfully!", ctx.name)
