"""Resolve one command line to a command body and run it."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from rich.text import Text

from . import commands
from .channel import Channel
from .commands import Command
from .game import RandomFn
from .store import QuizStore

ALIASES = {"h": "help", "p": "play", "q": "quit"}


@dataclass(frozen=True)
class ParsedLine:
    """Command name and optional first argument from one input line."""

    name: str
    arg: str | None


def parse_line(line: str) -> ParsedLine | None:
    """Split a line into lower-cased command name and first argument; None for blank lines."""
    words = line.split()
    if not words:
        return None
    name = words[0].lower()
    return ParsedLine(name=ALIASES.get(name, name), arg=words[1] if len(words) > 1 else None)


class Dispatcher:
    """Maps command names to command bodies over one shared store."""

    def __init__(self, store: QuizStore, rng: RandomFn | None = None) -> None:
        self.store = store
        self.commands: dict[str, Command] = {
            "help": commands.help_cmd,
            "list": commands.list_cmd,
            "show": commands.show_cmd,
            "add": commands.add_cmd,
            "delete": commands.delete_cmd,
            "edit": commands.edit_cmd,
            "test": commands.test_cmd,
            "play": commands.make_play_cmd(rng),
            "credits": commands.credits_cmd,
            "quit": commands.quit_cmd,
        }

    async def dispatch(self, channel: Channel, line: str) -> None:
        """Run the command on `line`; unknown or blank lines just re-arm the prompt."""
        parsed = parse_line(line)
        if parsed is None:
            channel.prompt()
            return
        command = self.commands.get(parsed.name)
        if command is None:
            channel.write_line(Text.assemble("Comando desconocido: '", (parsed.name, "red"), "'"))
            channel.write_line("Use 'help' para ver todos los comandos disponibles.")
            channel.prompt()
            return
        logger.debug("Dispatching {} {}", parsed.name, parsed.arg or "")
        await command(self.store, channel, parsed.arg)
