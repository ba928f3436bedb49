"""Tests for the rich-backed prompt adapter.

Answers are fed through an in-memory stream, which rich.prompt reads
line by line.
"""

from __future__ import annotations

import io

import pytest

from stencil.errors import InteractionUnavailable
from stencil.prompts import PromptAdapter
from stencil.registry import ManifestQuestion, TemplateDescriptor


def adapter(answers: str, console) -> PromptAdapter:
    return PromptAdapter(console=console, stream=io.StringIO(answers))


# ---------------------------------------------------------------------------
# confirm
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("answer, expected", [("y\n", True), ("n\n", False), ("\n", False)])
def test_confirm(answer, expected, console):
    assert adapter(answer, console).confirm("Delete folder myapp?") is expected


def test_confirm_reasks_on_garbage(console):
    assert adapter("maybe\ny\n", console).confirm("Delete?") is True


# ---------------------------------------------------------------------------
# choose_one
# ---------------------------------------------------------------------------


def test_choose_template_by_number(console, registry):
    chosen = adapter("2\n", console).choose_one("Choose a template", registry.list_all())

    assert isinstance(chosen, TemplateDescriptor)
    assert chosen.name == "react"
    assert "React starter" in console.file.getvalue()


def test_choose_defaults_to_first(console):
    assert adapter("\n", console).choose_one("Pick", ["npm", "pnpm"]) == "npm"


def test_choose_rejects_out_of_range(console):
    assert adapter("7\n2\n", console).choose_one("Pick", ["npm", "pnpm"]) == "pnpm"


def test_choose_requires_choices(console):
    with pytest.raises(ValueError):
        adapter("", console).choose_one("Pick", [])


# ---------------------------------------------------------------------------
# input_one / input_many
# ---------------------------------------------------------------------------


def test_input_one(console):
    assert adapter("My app\n", console).input_one("Description:") == "My app"


def test_input_one_blank(console):
    assert adapter("\n", console).input_one("Description:") == ""


def test_input_many_keeps_order(console):
    questions = [
        ManifestQuestion(name="name", message="Name:"),
        ManifestQuestion(name="description", message="Description:"),
        ManifestQuestion(name="keywords", message="Keywords:"),
    ]

    answers = adapter("\nA thing\nvue,cli\n", console).input_many(questions)

    assert list(answers) == ["name", "description", "keywords"]
    assert answers == {"name": "", "description": "A thing", "keywords": "vue,cli"}


# ---------------------------------------------------------------------------
# Non-interactive terminals
# ---------------------------------------------------------------------------


def test_non_interactive_fails_fast(console):
    prompter = PromptAdapter(console=console, interactive=False)

    with pytest.raises(InteractionUnavailable) as exc:
        prompter.confirm("Delete?")

    assert exc.value.fatal
    assert "--ignore" in exc.value.hint


def test_non_interactive_choose_fails_before_drawing(console, registry):
    prompter = PromptAdapter(console=console, interactive=False)

    with pytest.raises(InteractionUnavailable):
        prompter.choose_one("Choose", registry.list_all())

    assert console.file.getvalue() == ""


def test_stdin_not_a_tty(console, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    with pytest.raises(InteractionUnavailable):
        PromptAdapter(console=console).input_one("Name:")


def test_closed_input_is_reported(console, monkeypatch):
    def closed(*args, **kwargs):
        raise EOFError

    monkeypatch.setattr("rich.prompt.Prompt.get_input", closed)
    prompter = PromptAdapter(console=console, interactive=True)

    with pytest.raises(InteractionUnavailable, match="Input closed"):
        prompter.input_one("Name:")
