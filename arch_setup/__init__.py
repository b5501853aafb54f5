"""Arch Setup: modular, declarative installer for Arch Linux.

Core design goals:
- Declarative module catalog (YAML descriptors + optional hooks)
- Dependency-ordered, at-most-once module processing
- Idempotent package, service and dotfile handling
- Fail-fast on official packages, fail-soft everywhere else
- Centralized logging
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
