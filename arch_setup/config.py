from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import ConfigNotFound

logger = logging.getLogger(__name__)

ConfigValue = Union[str, List[str]]

_SECTION_RE = re.compile(r"^\[([^\]]+)\]\s*$")
_KEY_VALUE_RE = re.compile(r"^\s*([^=]+?)\s*=\s*(.+?)\s*$")
_LIST_RE = re.compile(r"^\[(.*)\]$")
_QUOTES = ("\"", "'")

DEFAULT_LOG_DIR = "$HOME/.local/share/arch-setup/logs"
DEFAULT_DOTFILES_DIR = "$HOME/.dotfiles"


def expand_home(value: str, home: Optional[str] = None) -> str:
    """Expand the user-home placeholder ($HOME, ${HOME}, leading ~)."""

    if not value:
        return value
    home = home if home is not None else os.path.expanduser("~")
    value = value.replace("${HOME}", home).replace("$HOME", home)
    if value == "~" or value.startswith("~/"):
        value = home + value[1:]
    return value


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def _parse_list(inner: str) -> List[str]:
    items: List[str] = []
    for raw in inner.split(","):
        item = raw.replace("\"", "").replace("'", "")
        item = " ".join(item.split())
        if item:
            items.append(item)
    return items


def parse_value(raw: str) -> ConfigValue:
    value = _strip_quotes(raw.strip())
    m = _LIST_RE.match(value)
    if m:
        return _parse_list(m.group(1))
    return value


def parse_lines(lines: Iterable[str]) -> Dict[str, ConfigValue]:
    """Parse the TOML subset used by config.toml.

    Supported: `# comments`, blank lines, `[section]` headers (no nesting),
    `key = value` with optional surrounding quotes, and inline lists
    `key = ["a", "b"]`. Anything else is ignored.
    """

    data: Dict[str, ConfigValue] = {}
    section = ""

    for line_num, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        m = _SECTION_RE.match(line.rstrip())
        if m:
            section = m.group(1).strip()
            continue

        m = _KEY_VALUE_RE.match(line)
        if not m:
            logger.debug("Ignoring malformed config line %d: %s", line_num, stripped)
            continue

        key, value = m.group(1).strip(), parse_value(m.group(2))
        data[f"{section}.{key}" if section else key] = value

    return data


@dataclass(frozen=True)
class ConfigStore:
    """Read-only view over parsed configuration, keyed by dotted path."""

    values: Dict[str, ConfigValue] = field(default_factory=dict)
    source: Optional[str] = None

    def get(self, key: str, default: Optional[ConfigValue] = None) -> Optional[ConfigValue]:
        value = self.values.get(key)
        if value is None or len(value) == 0:
            return default
        return value

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return value

    def get_bool(self, key: str, default: bool) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return self.get_str(key) == "true"

    def get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        value = self.get(key)
        if value is None:
            return list(default or [])
        if isinstance(value, list):
            return list(value)
        return value.split()

    def get_path(self, key: str, default: str = "", *, home: Optional[str] = None) -> str:
        return expand_home(self.get_str(key, default), home)

    # Keys consumed by the installer.

    @property
    def enabled_modules(self) -> List[str]:
        return self.get_list("modules.enabled", ["base"])

    @property
    def services_auto_enable(self) -> bool:
        return self.get_bool("services.auto_enable", True)

    @property
    def dotfiles_repo(self) -> str:
        return self.get_str("dotfiles.repo", "")

    @property
    def dotfiles_branch(self) -> str:
        return self.get_str("dotfiles.branch", "main")

    @property
    def log_dir(self) -> str:
        return self.get_path("logging.log_dir", DEFAULT_LOG_DIR)

    @property
    def log_to_file(self) -> bool:
        return self.get_bool("logging.log_to_file", True)

    @property
    def update_system(self) -> bool:
        return self.get_bool("packages.update_system", False)

    @property
    def network_check_host(self) -> str:
        return self.get_str("network.check_host", "archlinux.org")


def parse_config(text: str, *, source: Optional[str] = None) -> ConfigStore:
    return ConfigStore(values=parse_lines(text.splitlines()), source=source)


def load_config(path: str) -> ConfigStore:
    """Load config.toml; a missing or unreadable file raises ConfigNotFound."""

    p = Path(path)
    if not p.is_file():
        raise ConfigNotFound(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigNotFound(path) from e

    return parse_config(text, source=str(p))


def split_modules_arg(value: Optional[str]) -> Tuple[str, ...]:
    """Split a `--modules a,b` argument, dropping blanks."""

    if not value:
        return ()
    return tuple(m.strip() for m in value.split(",") if m.strip())
