from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

import pytest
from rich.console import Console

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from quizshell.channel import ConsoleChannel  # noqa: E402
from quizshell.seed import load_seed_quizzes  # noqa: E402
from quizshell.store import QuizStore  # noqa: E402


class Scripted:
    """Console channel fed from a list of replies; records prompts and output lines.

    Running out of replies behaves like the client hanging up.
    """

    def __init__(self, replies: Iterable[str] = ()) -> None:
        self.replies = list(replies)
        self.prompts: list[str] = []
        self.outputs: list[str] = []
        self.channel = ConsoleChannel(
            self._input,
            self.outputs.append,
            console=Console(color_system=None, width=100, highlight=False),
        )

    def _input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise EOFError
        return self.replies.pop(0)

    def has(self, text: str) -> bool:
        return any(text in line for line in self.outputs)


@pytest.fixture
def scripted() -> type[Scripted]:
    return Scripted


@pytest.fixture
def store() -> Iterable[QuizStore]:
    quiz_store = QuizStore(":memory:")
    try:
        yield quiz_store
    finally:
        quiz_store.close()


@pytest.fixture
def seeded_store(store: QuizStore) -> QuizStore:
    store.ensure_seeded(load_seed_quizzes())
    return store
