"""Exceptions raised by calcexpr."""

from __future__ import annotations


class CalcError(Exception):
    """Base class for calcexpr errors."""


class ParseError(CalcError):
    """The input text is not a well-formed expression."""

    def __init__(self, text: str, message: str) -> None:
        super().__init__(message)
        self.text = text
