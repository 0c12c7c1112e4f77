"""Failures raised by validation, the store and the interactive channel."""

from __future__ import annotations

from collections.abc import Iterable

from .models import FieldError


class QuizError(Exception):
    """Base class for failures reported back to the client as error lines."""


class MissingParameter(QuizError):
    """A command that needs an <id> was given none."""

    def __init__(self) -> None:
        super().__init__("Falta el parámetro <id>.")


class NotANumber(QuizError):
    """The <id> argument has no leading integer."""

    def __init__(self, raw: str) -> None:
        super().__init__("El valor del parámetro <id> no es un número.")
        self.raw = raw


class NotFound(QuizError):
    """No quiz exists for the requested id."""

    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"No existe un quiz asociado al id={quiz_id}.")
        self.quiz_id = quiz_id


class ValidationFailure(QuizError):
    """Store write rejected; carries every violated field."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(error.message for error in self.errors) or "Validation failed.")


class LineTooLong(QuizError):
    """The client sent a line longer than the channel accepts; it was dropped."""

    def __init__(self) -> None:
        super().__init__("La línea es demasiado larga.")


class ChannelClosed(Exception):
    """The interactive channel was closed while a prompt was pending."""
