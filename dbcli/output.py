"""Boxed status messages rendered with rich."""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text


class Reporter:
    """Renders command results as titled, coloured panels."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def info(self, message: str, *, title: str = "Info") -> None:
        self._panel(Text(message, style="yellow"), title=title, border_style="yellow")

    def notice(self, message: str, *, title: str = "Info") -> None:
        self._panel(Text(message, style="blue"), title=title, border_style="blue")

    def success(self, *lines: str, title: str = "Success") -> None:
        self._panel(Text("\n\n".join(lines), style="green"), title=title, border_style="green")

    def error(self, message: str, *, title: str = "Error", hint: str | None = None) -> None:
        parts: list[Text] = [Text(message, style="red")]
        if hint:
            parts.append(Text(""))
            parts.append(Text(hint, style="yellow"))
        self._panel(Group(*parts), title=title, border_style="red")

    def connection(
        self,
        heading: str,
        url: str,
        *,
        title: str = "Connection Info",
        border_style: str = "blue",
        lead: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Show a connection string under ``heading`` with an optional trailing hint."""

        parts: list[Text] = []
        if lead:
            parts.extend([Text(lead, style="green"), Text("")])
        parts.append(Text(heading, style="blue"))
        parts.append(Text(url, style="yellow"))
        if hint:
            parts.extend([Text(""), Text(hint, style="bright_black")])
        self._panel(Group(*parts), title=title, border_style=border_style)

    def _panel(self, body: Text | Group, *, title: str, border_style: str) -> None:
        self._console.print(Panel(body, title=title, border_style=border_style, padding=(1, 1), expand=False))


__all__ = ["Reporter"]
