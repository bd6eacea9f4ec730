"""pyratfem.config
Run-time capability flags and contract checking switch.

Flags are read once from the environment when the module is imported:

    PYRATFEM_CHECK_CONTRACTS              default on
    PYRATFEM_DISABLE_HIGHER_ORDER         default off
    PYRATFEM_DISABLE_SECOND_DERIVATIVES   default off

Use ``override(...)`` to change them temporarily (tests, benchmarks).
"""
from __future__ import annotations

import os
import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace, fields

from pyratfem.errors import CapabilityError

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    check_contracts: bool = True
    higher_order_shapes: bool = True
    second_derivatives: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            check_contracts=_env_flag("PYRATFEM_CHECK_CONTRACTS", True),
            higher_order_shapes=not _env_flag("PYRATFEM_DISABLE_HIGHER_ORDER", False),
            second_derivatives=not _env_flag("PYRATFEM_DISABLE_SECOND_DERIVATIVES", False),
        )


_settings = Settings.from_env()
logger.debug(f"pyratfem settings loaded: {_settings}")


def settings() -> Settings:
    return _settings


@contextmanager
def override(**flags):
    """Temporarily replace some flags, e.g. ``with override(check_contracts=False): ...``."""
    global _settings
    known = {f.name for f in fields(Settings)}
    unknown = set(flags) - known
    if unknown:
        raise KeyError(f"Unknown pyratfem setting(s): {sorted(unknown)}")
    previous = _settings
    _settings = replace(previous, **flags)
    try:
        yield _settings
    finally:
        _settings = previous


def require_capability(name: str, what: str) -> None:
    """Raise ``CapabilityError`` when flag *name* is off."""
    if not getattr(_settings, name):
        raise CapabilityError(f"{what} requires the '{name}' capability, which is disabled.")
