"""Core records handled by the quiz store and commands."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Quiz:
    """One question/answer record."""

    id: int
    question: str
    answer: str

    def accepts(self, reply: str) -> bool:
        """Return whether a reply matches the stored answer, ignoring case and surrounding blanks."""
        return reply.strip().casefold() == self.answer.strip().casefold()


@dataclass(frozen=True)
class FieldError:
    """One violated field constraint reported by the store."""

    field: str
    message: str
