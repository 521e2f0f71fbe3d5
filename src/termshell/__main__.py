"""Allow ``python -m termshell`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m termshell`` behaves identically to the ``termshell``
console script.
"""

from __future__ import annotations

from termshell.cli.app import cli

if __name__ == "__main__":
    cli()
