"""Randomized no-repeat quiz game played by the `play` command."""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from enum import Enum

from loguru import logger
from rich.text import Text

from .channel import Channel
from .models import Quiz
from .store import QuizStore

RandomFn = Callable[[], float]


class GameState(Enum):
    """Steps of one game."""

    LOADING = "loading"
    ASKING = "asking"
    SCORING = "scoring"
    WON = "won"
    LOST = "lost"


class QuizGame:
    """Ask every stored quiz once, in random order, until one is missed.

    The unresolved pool is a snapshot taken when the game loads; quizzes
    added or removed afterwards do not affect a running game. At every step
    ``len(pool) + score == initial_count``.
    """

    def __init__(self, store: QuizStore, channel: Channel, rng: RandomFn = random.random) -> None:
        self._store = store
        self._channel = channel
        self._rng = rng
        self.state = GameState.LOADING
        self.pool: list[Quiz] = []
        self.score = 0
        self.initial_count = 0

    @property
    def finished(self) -> bool:
        return self.state in (GameState.WON, GameState.LOST)

    def load(self) -> None:
        """Snapshot all quizzes into the unresolved pool."""
        self.pool = list(self._store.find_all())
        self.initial_count = len(self.pool)
        self.score = 0
        self.state = GameState.ASKING

    def pick(self) -> int | None:
        """Choose a random pool index, or finish as won when the pool is empty."""
        if not self.pool:
            self.state = GameState.WON
            return None
        return math.floor(self._rng() * len(self.pool))

    def score_answer(self, index: int, reply: str) -> bool:
        """Score a reply to ``pool[index]`` and advance the state."""
        self.state = GameState.SCORING
        quiz = self.pool[index]
        if not quiz.accepts(reply):
            self.state = GameState.LOST
            return False
        self.score += 1
        del self.pool[index]
        self.state = GameState.ASKING
        return True

    async def run(self) -> GameState:
        """Play until the pool is exhausted or an answer is wrong."""
        self.load()
        logger.debug("Game started with {} quizzes", self.initial_count)
        while not self.finished:
            index = self.pick()
            if index is None:
                self._channel.write_line(Text("No hay más preguntas", style="green"))
                self._summary()
                break
            quiz = self.pool[index]
            reply = await self._channel.ask(f"{quiz.question}?")
            if self.score_answer(index, reply):
                self._channel.write_line("CORRECTO")
                self._channel.write_line(f"Aciertos: {self.score}")
                self._channel.write_emphasized(str(self.score), "magenta")
            else:
                self._channel.write_line("INCORRECTO.")
                self._summary()
        logger.debug("Game {} with score {}/{}", self.state.value, self.score, self.initial_count)
        return self.state

    def _summary(self) -> None:
        self._channel.write_line(f"Fin del juego. Has acertado un total de {self.score} preguntas.")
        self._channel.write_emphasized(str(self.score), "magenta")
