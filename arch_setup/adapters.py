from __future__ import annotations

from typing import Protocol, Sequence

from .context import RunContext
from .lib import assets, pkg, prompt, services


class Adapters(Protocol):
    """Side-effecting collaborators the engine calls while processing a module.

    Every method raises on failure; the engine decides what is fatal.
    """

    def install_official_packages(self, names: Sequence[str]) -> None:
        ...

    def install_secondary_packages(self, names: Sequence[str]) -> None:
        ...

    def enable_service(self, name: str) -> None:
        ...

    def enable_user_service(self, name: str) -> None:
        ...

    def apply_defaults(self, source_dir: str, target_dir: str) -> None:
        ...

    def confirm(self, message: str, default: bool) -> bool:
        ...


class SystemAdapters:
    """Adapters backed by pacman, paru, systemctl and the local filesystem."""

    def __init__(self, ctx: RunContext) -> None:
        self.ctx = ctx

    def install_official_packages(self, names: Sequence[str]) -> None:
        pkg.install_official_packages(names, force=self.ctx.force, dry_run=self.ctx.dry_run)

    def install_secondary_packages(self, names: Sequence[str]) -> None:
        pkg.install_aur_packages(names, force=self.ctx.force, dry_run=self.ctx.dry_run)

    def enable_service(self, name: str) -> None:
        services.enable_service(name, dry_run=self.ctx.dry_run)

    def enable_user_service(self, name: str) -> None:
        services.enable_service(name, user=True, dry_run=self.ctx.dry_run)

    def apply_defaults(self, source_dir: str, target_dir: str) -> None:
        assets.apply_defaults(source_dir, target_dir, dry_run=self.ctx.dry_run)

    def confirm(self, message: str, default: bool) -> bool:
        return prompt.confirm(message, default, no_confirm=self.ctx.no_confirm)
