"""
Stencil Prompts - Interactive questions on top of rich.prompt

Every call blocks until the user answers. When stdin is not a terminal the
adapter raises InteractionUnavailable instead of waiting forever.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import IO, TypeVar

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from stencil.errors import InteractionUnavailable
from stencil.registry import ManifestQuestion, TemplateDescriptor

T = TypeVar("T", TemplateDescriptor, str)


class PromptAdapter:
    """
    confirm / choose_one / input_one / input_many.

    Args:
        console: Console to draw prompts on.
        stream: Read answers from this stream instead of the terminal.
            Answers from a stream are always considered interactive.
        interactive: Force the interactivity check. Defaults to stdin.isatty().
    """

    def __init__(
        self,
        console: Console | None = None,
        stream: IO[str] | None = None,
        interactive: bool | None = None,
    ):
        self.console = console or Console()
        self.stream = stream
        self._interactive = interactive

    @property
    def interactive(self) -> bool:
        if self._interactive is not None:
            return self._interactive
        if self.stream is not None:
            return True
        return sys.stdin.isatty()

    def _require_terminal(self, message: str) -> None:
        if not self.interactive:
            raise InteractionUnavailable(
                f"Cannot ask '{message}': stdin is not an interactive terminal",
                hint="Pass --template, --force and --ignore to run without prompts.",
            )

    def _ask(self, prompt_cls, message: str, **kwargs):
        self._require_terminal(message)
        try:
            return prompt_cls.ask(message, console=self.console, stream=self.stream, **kwargs)
        except EOFError as e:
            raise InteractionUnavailable(f"Input closed while asking '{message}'") from e

    # ═══════════════════════════════════════════════════════════════════════
    # QUESTION TYPES
    # ═══════════════════════════════════════════════════════════════════════

    def confirm(self, message: str) -> bool:
        return bool(self._ask(Confirm, message, default=False))

    def choose_one(self, message: str, choices: Sequence[T]) -> T:
        """Show a numbered list and return the chosen element."""
        if not choices:
            raise ValueError("choose_one needs at least one choice")
        self._require_terminal(message)

        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="right")
        table.add_column(style="bold")
        table.add_column(style="dim")
        for i, choice in enumerate(choices, start=1):
            if isinstance(choice, TemplateDescriptor):
                table.add_row(str(i), choice.name, choice.desc)
            else:
                table.add_row(str(i), str(choice), "")
        self.console.print(table)

        index = self._ask(
            IntPrompt,
            message,
            choices=[str(i) for i in range(1, len(choices) + 1)],
            show_choices=False,
            default=1,
        )
        return choices[index - 1]

    def input_one(self, message: str) -> str:
        return self._ask(Prompt, message, default="", show_default=False)

    def input_many(self, questions: Sequence[ManifestQuestion]) -> dict[str, str]:
        """Ask each question in order, one session; keyed by question name."""
        return {q.name: self.input_one(q.message) for q in questions}
