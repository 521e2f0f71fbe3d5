"""CLI layer — the facade, interactive shell, help and progress output.

This package is the outermost layer of the library.  It may import
from ``core`` and ``infra``, but no other layer may import from
``cli``.
"""
