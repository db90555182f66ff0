"""Output Sink — line accumulator with scoped, brace-delimited indentation."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from . import constants


class CodePrinter:
    def __init__(self, indent: str = constants.INDENT):
        self._indent = indent
        self._level = 0
        self._lines: list[str] = []

    @property
    def level(self) -> int:
        return self._level

    def line(self, text: str = "") -> None:
        """Append one line at the current indentation. Blank lines stay empty."""
        self._lines.append(f"{self._indent * self._level}{text}" if text else "")

    def lines(self, *texts: str) -> None:
        for text in texts:
            self.line(text)

    @contextmanager
    def block(self) -> Iterator[CodePrinter]:
        """Open a ``{`` scope; the matching ``}`` is written on every exit path."""
        self.line("{")
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1
            self.line("}")

    def get(self) -> str:
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
