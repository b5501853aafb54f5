from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


def repo_root() -> Path:
    # arch_setup/context.py -> arch_setup -> repo root
    return Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Paths:
    root: Path = field(default_factory=repo_root)
    config_file: Optional[Path] = None
    modules_dir: Optional[Path] = None
    home: Path = field(default_factory=lambda: Path(os.path.expanduser("~")))

    @property
    def config_path(self) -> Path:
        return self.config_file or self.root / "config" / "config.toml"

    @property
    def modules_path(self) -> Path:
        return self.modules_dir or self.root / "modules"


@dataclass(frozen=True)
class RunContext:
    """Read-only run flags, threaded through every component."""

    dry_run: bool = False
    force: bool = False
    no_confirm: bool = False
    skip_dotfiles: bool = False
    verbose: bool = False
    modules: Tuple[str, ...] = ()
    paths: Paths = field(default_factory=Paths)

    @property
    def home(self) -> Path:
        return self.paths.home


@dataclass
class RunSummary:
    """What a finished (or aborted) run did; filled in by the phases."""

    processed: List[str] = field(default_factory=list)
    requested: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    log_path: Optional[str] = None
