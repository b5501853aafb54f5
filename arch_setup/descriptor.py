from __future__ import annotations

import functools
import importlib.util
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from .config import ConfigStore
from .context import RunContext
from .errors import ModuleNotFound

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "module.yaml"
HOOKS_FILE = "hooks.py"
DEFAULTS_DIR = "defaults"
HOOK_NAMES = ("install", "configure", "post_install")

Hook = Callable[[], Any]


@dataclass(frozen=True)
class ModuleContext:
    """What a module hook gets to see."""

    name: str
    module_dir: Path
    run: RunContext
    config: ConfigStore

    @property
    def dry_run(self) -> bool:
        return self.run.dry_run

    @property
    def home(self) -> Path:
        return self.run.home

    @property
    def log(self) -> logging.Logger:
        return logging.getLogger(f"arch_setup.modules.{self.name}")


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    module_dir: Path
    description: str = ""
    requires: Tuple[str, ...] = ()
    official_packages: Tuple[str, ...] = ()
    secondary_packages: Tuple[str, ...] = ()
    services: Tuple[str, ...] = ()
    user_services: Tuple[str, ...] = ()
    install: Optional[Hook] = field(default=None, compare=False)
    configure: Optional[Hook] = field(default=None, compare=False)
    post_install: Optional[Hook] = field(default=None, compare=False)

    @property
    def defaults_dir(self) -> Optional[Path]:
        d = self.module_dir / DEFAULTS_DIR
        return d if d.is_dir() else None


def _names(raw: Any, *, field_name: str, module: str) -> Tuple[str, ...]:
    """Normalize a YAML list of names to an ordered, de-duplicated tuple."""

    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = raw.split()
    if not isinstance(raw, list):
        raise ModuleNotFound(f"Module {module}: {field_name} must be a list", module=module)

    out: List[str] = []
    for item in raw:
        s = str(item).strip()
        if s and s not in out:
            out.append(s)
    return tuple(out)


def _load_hooks_module(name: str, path: Path) -> ModuleType:
    # Each load executes hooks.py into a brand-new module object so that
    # nothing defined by one module is visible to the next.
    spec = importlib.util.spec_from_file_location(f"arch_setup_module_hooks_{name.replace('-', '_')}", path)
    if spec is None or spec.loader is None:
        raise ModuleNotFound(f"Cannot import hooks for module {name}: {path}", module=name)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def _bind_hooks(mod: ModuleType, module_ctx: ModuleContext) -> Dict[str, Hook]:
    hooks: Dict[str, Hook] = {}
    for hook_name in HOOK_NAMES:
        fn = getattr(mod, hook_name, None)
        if fn is None:
            continue
        if not callable(fn):
            raise ModuleNotFound(
                f"Module {module_ctx.name}: {hook_name} in {HOOKS_FILE} is not callable",
                module=module_ctx.name,
            )
        hooks[hook_name] = functools.partial(fn, module_ctx)
    return hooks


class ModuleCatalog:
    """Lazily loads module descriptors from `<modules_dir>/<name>/`."""

    def __init__(self, modules_dir: Path, *, ctx: RunContext, config: ConfigStore) -> None:
        self.modules_dir = Path(modules_dir)
        self.ctx = ctx
        self.config = config

    def available(self) -> List[str]:
        if not self.modules_dir.is_dir():
            return []
        return sorted(p.name for p in self.modules_dir.iterdir() if (p / DESCRIPTOR_FILE).is_file())

    def load(self, name: str) -> ModuleDescriptor:
        """Load a fresh descriptor for `name`.

        Raises ModuleNotFound if the module directory or its module.yaml is
        missing, unparsable, or if hooks.py fails to import.
        """

        if not name or "/" in name or name.startswith("."):
            raise ModuleNotFound(f"Invalid module name: {name!r}", module=name)

        module_dir = self.modules_dir / name
        manifest = module_dir / DESCRIPTOR_FILE
        if not manifest.is_file():
            known = ", ".join(self.available()) or "none"
            raise ModuleNotFound(f"Module not found: {name} (available: {known})", module=name)

        try:
            raw = yaml.safe_load(manifest.read_text(encoding="utf-8")) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ModuleNotFound(f"Module {name}: cannot parse {manifest}: {e}", module=name) from e
        if not isinstance(raw, dict):
            raise ModuleNotFound(f"Module {name}: {manifest} must be a mapping", module=name)

        module_ctx = ModuleContext(name=name, module_dir=module_dir, run=self.ctx, config=self.config)

        hooks: Dict[str, Hook] = {}
        hooks_path = module_dir / HOOKS_FILE
        if hooks_path.is_file():
            try:
                hooks = _bind_hooks(_load_hooks_module(name, hooks_path), module_ctx)
            except ModuleNotFound:
                raise
            except Exception as e:
                raise ModuleNotFound(f"Module {name}: failed to import {hooks_path}: {e}", module=name) from e

        secondary = raw.get("aur_packages", raw.get("secondary_packages"))

        desc = ModuleDescriptor(
            name=name,
            module_dir=module_dir,
            description=str(raw.get("description") or ""),
            requires=_names(raw.get("requires"), field_name="requires", module=name),
            official_packages=_names(raw.get("official_packages"), field_name="official_packages", module=name),
            secondary_packages=_names(secondary, field_name="aur_packages", module=name),
            services=_names(raw.get("services"), field_name="services", module=name),
            user_services=_names(raw.get("user_services"), field_name="user_services", module=name),
            **hooks,
        )

        declared = raw.get("name")
        if declared and str(declared) != name:
            logger.debug("Module directory %s declares name %s", name, declared)

        return desc
