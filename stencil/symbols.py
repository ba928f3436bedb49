"""
Stencil Symbols - Status glyphs for console messages

Rich markup strings, with an ASCII fallback for terminals that cannot
render the Unicode set.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping


UNICODE_SYMBOLS = {
    "info": "[blue]ℹ[/blue]",
    "success": "[green]✔[/green]",
    "warning": "[yellow]⚠[/yellow]",
    "error": "[red]✖[/red]",
    "arrow": "[yellow]➦[/yellow]",
    "star": "[cyan]✵[/cyan]",
}

ASCII_SYMBOLS = {
    "info": "[blue]i[/blue]",
    "success": "[green]√[/green]",
    "warning": "[yellow]‼[/yellow]",
    "error": "[red]×[/red]",
    "arrow": "[yellow]->[/yellow]",
    "star": "[cyan]*[/cyan]",
}

_WINDOWS_UNICODE_TERMS = {"xterm-256color", "alacritty", "rxvt-unicode", "rxvt-unicode-256color"}


def is_unicode_supported(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> bool:
    """Guess whether the terminal can draw the Unicode symbol set."""
    env = os.environ if env is None else env
    platform = sys.platform if platform is None else platform

    if platform != "win32":
        # Linux kernel console
        return env.get("TERM") != "linux"

    return (
        bool(env.get("WT_SESSION"))
        or bool(env.get("TERMINUS_SUBLIME"))
        or env.get("ConEmuTask") == "{cmd::Cmder}"
        or env.get("TERM_PROGRAM") in ("Terminus-Sublime", "vscode")
        or env.get("TERM") in _WINDOWS_UNICODE_TERMS
        or env.get("TERMINAL_EMULATOR") == "JetBrains-JediTerm"
    )


class Symbols:
    """Attribute access over one of the symbol tables."""

    def __init__(self, unicode: bool | None = None):
        if unicode is None:
            unicode = is_unicode_supported()
        self._table = UNICODE_SYMBOLS if unicode else ASCII_SYMBOLS

    def __getattr__(self, name: str) -> str:
        try:
            return self._table[name]
        except KeyError:
            raise AttributeError(name) from None


symbols = Symbols()
