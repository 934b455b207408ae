"""Interactive questions asked by the command surface."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from .config import DEFAULT_PORT, DEFAULT_USER
from .models import ProfileCandidate


class Prompter(Protocol):
    """Source of user answers; swapped for canned answers in tests."""

    def confirm(self, message: str) -> bool: ...

    def profile_candidate(self) -> ProfileCandidate: ...

    def database_name(self) -> str: ...


class RichPrompter:
    """Asks questions on the terminal through rich prompts."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def confirm(self, message: str) -> bool:
        return Confirm.ask(message, default=False, console=self._console)

    def profile_candidate(self) -> ProfileCandidate:
        host = self._ask_required("Enter database host", "Host is required")
        port = IntPrompt.ask("Enter database port", default=DEFAULT_PORT, console=self._console)
        user = Prompt.ask("Enter database user", default=DEFAULT_USER, console=self._console)
        password = Prompt.ask("Enter database password", password=True, console=self._console)
        return ProfileCandidate.build(host=host, port=port, user=user, password=password)

    def database_name(self) -> str:
        return self._ask_required("Enter the database name", "Database name is required")

    def _ask_required(self, question: str, error: str) -> str:
        while True:
            answer = Prompt.ask(question, console=self._console).strip()
            if answer:
                return answer
            self._console.print(f"[prompt.invalid]{error}")


__all__ = ["Prompter", "RichPrompter"]
