"""Runtime configuration state management."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, FrozenSet, Iterable

if TYPE_CHECKING:
    from tracelink.config import TracelinkConfig

DEFAULT_SUPPORTED_VERSIONS: FrozenSet[str] = frozenset({"00"})

# Global runtime configuration state
_config = {
    "supported_versions": DEFAULT_SUPPORTED_VERSIONS,
    "reject_zero_ids": False,
    "debug": False,
}


def set_supported_versions(value: Iterable[str]) -> None:
    _config["supported_versions"] = frozenset(value)


def get_supported_versions() -> FrozenSet[str]:
    return _config["supported_versions"]


def set_reject_zero_ids(value: bool) -> None:
    _config["reject_zero_ids"] = value


def get_reject_zero_ids() -> bool:
    return _config["reject_zero_ids"]


def set_debug(value: bool) -> None:
    _config["debug"] = value
    # leave the host application's level alone unless debug is requested
    if value:
        logging.getLogger("tracelink").setLevel(logging.DEBUG)


def get_debug() -> bool:
    return _config["debug"]


def configure(cfg: "TracelinkConfig") -> None:
    """Apply a loaded config to the process-wide runtime state."""
    set_supported_versions(cfg.propagation.supported_versions)
    set_reject_zero_ids(cfg.propagation.reject_zero_ids)
    set_debug(cfg.logging.debug)


def reset() -> None:
    """Restore defaults."""
    set_supported_versions(DEFAULT_SUPPORTED_VERSIONS)
    set_reject_zero_ids(False)
    set_debug(False)
