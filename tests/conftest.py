"""Shared fixtures: a scratch module catalog and a recording adapter."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

import pytest
import yaml

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from arch_setup.config import ConfigStore, parse_config  # noqa: E402
from arch_setup.context import Paths, RunContext  # noqa: E402
from arch_setup.descriptor import ModuleCatalog  # noqa: E402
from arch_setup.engine import Engine  # noqa: E402


class RecordingAdapters:
    """Adapters that record every call and fail on request."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, object]] = []
        self.fail_official: Set[str] = set()
        self.fail_secondary: Set[str] = set()
        self.fail_services: Set[str] = set()
        self.answers: List[bool] = []

    def _fail_if(self, names: Sequence[str], failing: Set[str], what: str) -> None:
        bad = [n for n in names if n in failing]
        if bad:
            raise RuntimeError(f"{what} failed: {' '.join(bad)}")

    def install_official_packages(self, names: Sequence[str]) -> None:
        self.calls.append(("official", tuple(names)))
        self._fail_if(names, self.fail_official, "pacman")

    def install_secondary_packages(self, names: Sequence[str]) -> None:
        self.calls.append(("aur", tuple(names)))
        self._fail_if(names, self.fail_secondary, "paru")

    def enable_service(self, name: str) -> None:
        self.calls.append(("service", name))
        self._fail_if([name], self.fail_services, "systemctl")

    def enable_user_service(self, name: str) -> None:
        self.calls.append(("user_service", name))
        self._fail_if([name], self.fail_services, "systemctl --user")

    def apply_defaults(self, source_dir: str, target_dir: str) -> None:
        self.calls.append(("defaults", (source_dir, target_dir)))

    def confirm(self, message: str, default: bool) -> bool:
        self.calls.append(("confirm", message))
        return self.answers.pop(0) if self.answers else True

    def kinds(self, kind: str) -> List[object]:
        return [arg for k, arg in self.calls if k == kind]


class ModuleFactory:
    def __init__(self, modules_dir: Path) -> None:
        self.modules_dir = modules_dir
        self.modules_dir.mkdir(parents=True, exist_ok=True)

    def __call__(
        self,
        name: str,
        *,
        requires: Sequence[str] = (),
        official: Sequence[str] = (),
        aur: Sequence[str] = (),
        services: Sequence[str] = (),
        user_services: Sequence[str] = (),
        hooks: Optional[str] = None,
        defaults: Optional[Dict[str, str]] = None,
    ) -> Path:
        d = self.modules_dir / name
        d.mkdir(parents=True, exist_ok=True)
        manifest = {
            "name": name,
            "description": f"{name} test module",
            "requires": list(requires),
            "official_packages": list(official),
            "aur_packages": list(aur),
            "services": list(services),
            "user_services": list(user_services),
        }
        (d / "module.yaml").write_text(yaml.safe_dump(manifest), encoding="utf-8")
        if hooks is not None:
            (d / "hooks.py").write_text(hooks, encoding="utf-8")
        for rel, content in (defaults or {}).items():
            p = d / "defaults" / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content, encoding="utf-8")
        return d


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    return tmp_path / "modules"


@pytest.fixture
def make_module(modules_dir: Path) -> ModuleFactory:
    return ModuleFactory(modules_dir)


@pytest.fixture
def ctx(home: Path, modules_dir: Path) -> RunContext:
    return RunContext(paths=Paths(modules_dir=modules_dir, home=home))


@pytest.fixture
def config() -> ConfigStore:
    return parse_config("")


@pytest.fixture
def adapters() -> RecordingAdapters:
    return RecordingAdapters()


@pytest.fixture
def make_engine(modules_dir: Path, adapters: RecordingAdapters, ctx: RunContext, config: ConfigStore):
    def _make(*, ctx: RunContext = ctx, config: ConfigStore = config) -> Engine:
        catalog = ModuleCatalog(modules_dir, ctx=ctx, config=config)
        return Engine(load=catalog.load, adapters=adapters, config=config, ctx=ctx)

    return _make
