"""Public package surface for zint.

Exports ``main`` for programmatic CLI invocation.
The filesystem core lives in ``listing``, ``preview``, ``bulk`` and ``watch``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
