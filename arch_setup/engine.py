from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set

from .adapters import Adapters
from .config import ConfigStore
from .context import RunContext
from .descriptor import ModuleDescriptor
from .errors import (
    CyclicDependency,
    HookFailure,
    PackageInstallFailure,
    ServiceEnableFailure,
    SetupError,
)

logger = logging.getLogger(__name__)

DescriptorLoader = Callable[[str], ModuleDescriptor]


@dataclass(frozen=True)
class RunWarning:
    module: str
    kind: str
    message: str


@dataclass(frozen=True)
class EngineResult:
    processed: List[str]
    warnings: List[RunWarning]


class Engine:
    """Resolves module dependencies and runs each module's lifecycle once.

    Per module, in order: dependencies, official packages (fatal), AUR
    packages, install hook, default configs, configure hook, services,
    post_install hook. Everything after the official packages only warns.
    """

    def __init__(
        self,
        *,
        load: DescriptorLoader,
        adapters: Adapters,
        config: ConfigStore,
        ctx: RunContext,
    ) -> None:
        self._load = load
        self.adapters = adapters
        self.config = config
        self.ctx = ctx
        self.processed: List[str] = []
        self._processed: Set[str] = set()
        self._in_progress: List[str] = []
        self.warnings: List[RunWarning] = []

    def _warn(self, module: str, kind: str, message: str) -> None:
        logger.warning(message)
        self.warnings.append(RunWarning(module=module, kind=kind, message=message))

    def process(self, name: str) -> None:
        """Process `name` and its dependencies, at most once per run.

        Raises ModuleNotFound, CyclicDependency or PackageInstallFailure;
        those abort the chain that requested the module.
        """

        if name in self._processed:
            return
        if name in self._in_progress:
            start = self._in_progress.index(name)
            raise CyclicDependency([*self._in_progress[start:], name])

        self._in_progress.append(name)
        try:
            desc = self._load(name)
            self._run_lifecycle(desc)
        finally:
            self._in_progress.pop()

        self._processed.add(name)
        self.processed.append(name)
        logger.info("Module %s completed", name)

    def _run_lifecycle(self, desc: ModuleDescriptor) -> None:
        name = desc.name
        logger.info("==== Processing module: %s ====", name)
        if desc.description:
            logger.debug("%s: %s", name, desc.description)

        if desc.requires:
            logger.info("Module requires: %s", " ".join(desc.requires))
            for dep in desc.requires:
                if dep not in self._processed:
                    logger.info("Processing dependency: %s", dep)
                    self.process(dep)

        if desc.official_packages:
            logger.info("Installing official packages for %s...", name)
            try:
                self.adapters.install_official_packages(desc.official_packages)
            except SetupError:
                raise
            except Exception as e:
                raise PackageInstallFailure(
                    f"Failed to install official packages for {name}: {e}", module=name
                ) from e

        if desc.secondary_packages:
            logger.info("Installing AUR packages for %s...", name)
            try:
                self.adapters.install_secondary_packages(desc.secondary_packages)
            except Exception as e:
                err = PackageInstallFailure(
                    f"Failed to install some AUR packages for {name}: {e}", module=name, official=False
                )
                self._warn(name, err.kind, str(err))

        self._run_hook(desc, "install", desc.install)
        self._place_defaults(desc)
        self._run_hook(desc, "configure", desc.configure)
        self._enable_services(desc)
        self._run_hook(desc, "post_install", desc.post_install)

    def _run_hook(self, desc: ModuleDescriptor, hook_name: str, hook: Optional[Callable[[], object]]) -> None:
        if hook is None:
            return
        logger.debug("Running %s hook for %s", hook_name, desc.name)
        try:
            hook()
        except Exception as e:
            err = HookFailure(hook_name, e, module=desc.name)
            self._warn(desc.name, err.kind, str(err))

    def dotfiles_dir(self) -> str:
        return self.config.get_path("dotfiles.target_dir", "", home=str(self.ctx.home))

    def _place_defaults(self, desc: ModuleDescriptor) -> None:
        defaults = desc.defaults_dir
        if defaults is None:
            return

        dotfiles = self.dotfiles_dir()
        if dotfiles and Path(dotfiles).is_dir() and not self.ctx.skip_dotfiles:
            logger.info("Using dotfiles from %s (skipping module defaults)", dotfiles)
            return

        logger.info("Applying default configs for %s...", desc.name)
        try:
            self.adapters.apply_defaults(str(defaults), str(self.ctx.home))
        except Exception as e:
            self._warn(desc.name, "DefaultsFailure", f"Failed to apply default configs for {desc.name}: {e}")

    def _enable_services(self, desc: ModuleDescriptor) -> None:
        if not (desc.services or desc.user_services):
            return
        if not self.config.services_auto_enable:
            logger.info("services.auto_enable is off; not enabling services for %s", desc.name)
            return

        for user, names, enable in (
            (False, desc.services, self.adapters.enable_service),
            (True, desc.user_services, self.adapters.enable_user_service),
        ):
            if not names:
                continue
            logger.info("Enabling %sservices for %s...", "user " if user else "", desc.name)
            failed: List[str] = []
            for svc in names:
                try:
                    enable(svc)
                except Exception as e:
                    logger.error("Failed to enable %s: %s", svc, e)
                    failed.append(svc)
            if failed:
                err = ServiceEnableFailure(failed, module=desc.name, user=user)
                self._warn(desc.name, err.kind, str(err))

    def run(self, modules: Iterable[str]) -> EngineResult:
        """Process each requested module in order, stopping at the first fatal error."""

        for name in modules:
            if name in self._processed:
                continue
            try:
                self.process(name)
            except SetupError as e:
                if e.module is None:
                    e.module = name
                logger.error("Failed to process module: %s (%s)", name, e)
                raise

        return EngineResult(processed=list(self.processed), warnings=list(self.warnings))


def requested_modules(ctx: RunContext, config: ConfigStore) -> Sequence[str]:
    """Modules from --modules, else whitespace-separated modules.enabled."""

    if ctx.modules:
        return list(ctx.modules)
    return config.enabled_modules
