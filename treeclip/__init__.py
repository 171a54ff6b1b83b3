"""Public package surface for treeclip.

Exports ``main`` for programmatic CLI invocation.
The engine lives in ``treeclip.session`` and the modules it composes.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
