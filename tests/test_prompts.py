"""Tests for the rich-backed prompter."""

from __future__ import annotations

import io
from typing import Any

import pytest
from rich.console import Console

from dbcli.config import DEFAULT_PORT, DEFAULT_USER
from dbcli.prompts import RichPrompter


class _Terminal:
    """Replays typed answers; a blank answer takes the prompt's default when it has one."""

    def __init__(self, *answers: str) -> None:
        self._answers = list(answers)
        self.questions: list[tuple[str, dict[str, Any]]] = []

    def ask(self, question: str, **kwargs: Any) -> Any:
        self.questions.append((question, kwargs))
        answer = self._answers.pop(0)
        if not answer and "default" in kwargs:
            return kwargs["default"]
        return answer


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


def _patch(monkeypatch: pytest.MonkeyPatch, terminal: _Terminal) -> None:
    monkeypatch.setattr("dbcli.prompts.Prompt.ask", terminal.ask)
    monkeypatch.setattr("dbcli.prompts.IntPrompt.ask", terminal.ask)
    monkeypatch.setattr("dbcli.prompts.Confirm.ask", terminal.ask)


def test_blank_host_is_asked_again(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    terminal = _Terminal("", "   ", "db.local", "", "", "secret")
    _patch(monkeypatch, terminal)

    candidate = RichPrompter(console).profile_candidate()

    hosts = [question for question, _ in terminal.questions if question == "Enter database host"]
    assert len(hosts) == 3
    assert candidate.profile.host == "db.local"
    assert console.file.getvalue().count("Host is required") == 2  # type: ignore[attr-defined]


def test_empty_answers_take_port_and_user_defaults(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    terminal = _Terminal("db.local", "", "", "secret")
    _patch(monkeypatch, terminal)

    candidate = RichPrompter(console).profile_candidate()

    assert candidate.profile.port == DEFAULT_PORT == 5432
    assert candidate.profile.user == DEFAULT_USER == "root"
    assert candidate.password == "secret"
    questions = dict(terminal.questions)
    assert questions["Enter database port"]["default"] == 5432
    assert questions["Enter database user"]["default"] == "root"


def test_password_is_masked(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    terminal = _Terminal("db.local", "", "", "")
    _patch(monkeypatch, terminal)

    candidate = RichPrompter(console).profile_candidate()

    assert dict(terminal.questions)["Enter database password"]["password"] is True
    assert candidate.password == ""


def test_confirm_defaults_to_no(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    seen: dict[str, Any] = {}

    def _ask(question: str, **kwargs: Any) -> bool:
        seen.update(kwargs, question=question)
        return kwargs["default"]

    monkeypatch.setattr("dbcli.prompts.Confirm.ask", _ask)

    assert RichPrompter(console).confirm("Overwrite?") is False
    assert seen["question"] == "Overwrite?"
    assert seen["default"] is False


def test_blank_database_name_is_asked_again(monkeypatch: pytest.MonkeyPatch, console: Console) -> None:
    terminal = _Terminal("", " analytics ")
    _patch(monkeypatch, terminal)

    assert RichPrompter(console).database_name() == "analytics"
    assert len(terminal.questions) == 2
    assert "Database name is required" in console.file.getvalue()  # type: ignore[attr-defined]
