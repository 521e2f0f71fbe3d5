"""termshell — command-line argument handling, column layout and interactive shells.

Built on Rich for terminal capabilities and prompt_toolkit for line
editing, with a strict layered architecture.
"""

from termshell.version import __version__

__all__: list[str] = ["__version__"]
