from __future__ import annotations

from typing import Optional, Sequence


class SetupError(RuntimeError):
    """Base class for every error the installer reports by kind."""

    kind = "SetupError"

    def __init__(self, message: str, *, module: Optional[str] = None) -> None:
        super().__init__(message)
        self.module = module


class ConfigNotFound(SetupError):
    kind = "ConfigNotFound"

    def __init__(self, path: str) -> None:
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ModuleNotFound(SetupError):
    kind = "ModuleNotFound"


class CyclicDependency(SetupError):
    kind = "CyclicDependency"

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(
            "Cyclic module dependency: " + " -> ".join(self.cycle),
            module=self.cycle[-1] if self.cycle else None,
        )


class PackageInstallFailure(SetupError):
    kind = "PackageInstallFailure"

    def __init__(self, message: str, *, module: Optional[str] = None, official: bool = True) -> None:
        super().__init__(message, module=module)
        self.official = official


class ServiceEnableFailure(SetupError):
    kind = "ServiceEnableFailure"

    def __init__(self, failed: Sequence[str], *, module: Optional[str] = None, user: bool = False) -> None:
        scope = "user service" if user else "service"
        super().__init__(f"{len(failed)} {scope}(s) failed to enable: {', '.join(failed)}", module=module)
        self.failed = list(failed)
        self.user = user


class HookFailure(SetupError):
    kind = "HookFailure"

    def __init__(self, hook: str, cause: BaseException, *, module: Optional[str] = None) -> None:
        super().__init__(f"Module {hook} hook failed for {module}: {cause}", module=module)
        self.hook = hook


class PreflightError(SetupError):
    """Platform, tooling or connectivity requirement not met."""

    kind = "PreflightError"


class SetupCancelled(SetupError):
    """The user declined a confirmation gate."""

    kind = "SetupCancelled"
