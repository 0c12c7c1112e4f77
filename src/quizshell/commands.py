"""Command bodies run by the dispatcher.

Every command takes ``(store, channel, arg)``. Failures are turned into error
lines on the channel and the command prompt is re-armed afterwards; only
`quit` ends the conversation instead.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from dataclasses import replace

from loguru import logger
from rich.text import Text

from .channel import Channel
from .errors import ChannelClosed, NotFound, ValidationFailure
from .game import QuizGame, RandomFn
from .models import Quiz
from .store import QuizStore
from .validation import validate_id

Command = Callable[[QuizStore, Channel, str | None], Awaitable[None]]

HELP_LINES = (
    "Comandos:",
    "  h|help - Muestra esta ayuda.",
    "  list - Listar los quizzes existentes.",
    "  show <id> - Muestra la pregunta y la respuesta el quiz indicado.",
    "  add - Añadir un nuevo quiz interactivamente.",
    "  delete <id> - Borrar el quiz indicado.",
    "  edit <id> - Editar el quiz indicado.",
    "  test <id> - Probar el quiz indicado.",
    "  p|play - Jugar a preguntar aleatoriamente todos los quizzes.",
    "  credits - Créditos.",
    "  q|quit - Salir del programa.",
)
AUTHORS = ("Jesús Sousa Herranz", "Agustín Rivero Ibáñez")
INVALID_QUIZ = "El quiz es erroneo: "


def rearms_prompt(body: Command) -> Command:
    """Report failures of a command body as error lines, then re-arm the prompt."""

    @functools.wraps(body)
    async def wrapper(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
        try:
            await body(store, channel, arg)
        except ChannelClosed:
            raise
        except ValidationFailure as exc:
            logger.debug("{} rejected: {}", body.__name__, exc)
            channel.write_error(INVALID_QUIZ)
            for error in exc.errors:
                channel.write_error(error.message)
        except Exception as exc:
            logger.warning("{} failed: {}", body.__name__, exc)
            channel.write_error(str(exc))
        channel.prompt()

    return wrapper


def _quiz_text(quiz: Quiz, *, with_answer: bool = True) -> Text:
    text = Text.assemble(" [", (str(quiz.id), "magenta"), "]: ", quiz.question)
    if with_answer:
        text.append(" ")
        text.append("=>", style="magenta")
        text.append(f" {quiz.answer}")
    return text


def _find(store: QuizStore, raw_id: str | None) -> Quiz:
    """Validate the <id> argument and load its quiz."""
    quiz_id = validate_id(raw_id)
    quiz = store.find_by_id(quiz_id)
    if quiz is None:
        raise NotFound(quiz_id)
    return quiz


@rearms_prompt
async def help_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Show available commands."""
    for line in HELP_LINES:
        channel.write_line(line)


@rearms_prompt
async def list_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """List every quiz id and question."""
    for quiz in store.find_all():
        channel.write_line(_quiz_text(quiz, with_answer=False))


@rearms_prompt
async def show_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Show question and answer of one quiz."""
    channel.write_line(_quiz_text(_find(store, arg)))


@rearms_prompt
async def add_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Ask for a question, then its answer, and store the new quiz."""
    question = await channel.ask(" Introduzca una pregunta: ")
    answer = await channel.ask(" Introduzca la respuesta: ")
    quiz = store.create(question, answer)
    logger.info("Quiz {} added", quiz.id)
    line = Text.assemble(" ", ("Se ha añadido", "magenta"), ": ", quiz.question, " ")
    line.append("=>", style="magenta")
    line.append(f" {quiz.answer}")
    channel.write_line(line)


@rearms_prompt
async def delete_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Delete one quiz."""
    quiz = _find(store, arg)
    store.destroy(quiz.id)
    logger.info("Quiz {} deleted", quiz.id)


@rearms_prompt
async def edit_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Replace question and answer of one quiz, keeping its id."""
    quiz = _find(store, arg)
    question = await channel.ask(" Introduzca la pregunta: ", default=quiz.question)
    answer = await channel.ask(" Introduzca la respuesta: ", default=quiz.answer)
    updated = store.update(replace(quiz, question=question, answer=answer))
    logger.info("Quiz {} edited", updated.id)
    channel.write_line(
        Text.assemble(
            " Se ha cambiado el quiz ",
            (str(updated.id), "magenta"),
            " por: ",
            updated.question,
            " ",
            ("=>", "magenta"),
            f" {updated.answer}",
        )
    )


@rearms_prompt
async def test_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Ask one quiz and report whether the answer is right; nothing is recorded."""
    quiz = _find(store, arg)
    reply = await channel.ask(f"{quiz.question}? ")
    if quiz.accepts(reply):
        channel.write_line("CORRECTO")
        channel.write_emphasized("CORRECTO", "green")
    else:
        channel.write_line("INCORRECTO")
        channel.write_emphasized("INCORRECTO", "red")


def make_play_cmd(rng: RandomFn | None = None) -> Command:
    """Build the `play` command, optionally with a fixed random source."""

    @rearms_prompt
    async def play_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
        """Ask every quiz in random order until one is missed."""
        game = QuizGame(store, channel) if rng is None else QuizGame(store, channel, rng)
        await game.run()

    return play_cmd


play_cmd = make_play_cmd()


@rearms_prompt
async def credits_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Show the authors."""
    channel.write_line("Autores de la práctica:")
    for author in AUTHORS:
        channel.write_line(author, "green")


async def quit_cmd(store: QuizStore, channel: Channel, arg: str | None = None) -> None:
    """Close the channel; the session loop stops after this."""
    channel.close()
