"""
Machine dialect registry.
"""
from .base_dialect import BaseDialect
from .mazak_dialect import MazakIntegrexDialect

DIALECTS = {
    MazakIntegrexDialect.name: MazakIntegrexDialect,
}

_instances = {}


def get_dialect(name: str) -> BaseDialect:
    """Return the shared dialect instance registered under ``name``."""
    if name not in DIALECTS:
        known = ", ".join(sorted(DIALECTS))
        raise KeyError(f"Unknown dialect '{name}' (known: {known})")
    if name not in _instances:
        _instances[name] = DIALECTS[name]()
    return _instances[name]
