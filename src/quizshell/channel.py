"""Interactive text channels: a TCP stream and the local console.

Both render through `rich`, so colored fragments and the emphasized panel look
the same locally and over the wire. Command bodies only see the `Channel`
protocol.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.text import Text

from .errors import ChannelClosed, LineTooLong

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
DEFAULT_PROMPT = "quiz > "
ENCODING = "utf-8"


class Channel(Protocol):
    """Duplex text conversation with one client."""

    @property
    def closed(self) -> bool: ...

    def write_line(self, text: str | Text, style: str | None = None) -> None: ...

    def write_error(self, text: str) -> None: ...

    def write_emphasized(self, text: str, style: str | None = None) -> None: ...

    async def readline(self) -> str: ...

    async def ask(self, prompt: str, default: str | None = None) -> str: ...

    def prompt(self) -> None: ...

    def close(self) -> None: ...


def error_text(message: str) -> Text:
    """Build the error line shown for any failed command."""
    return Text.assemble(("Error", "red"), ": ", (message, "red on bright_yellow"))


def emphasized(text: str, style: str | None = None) -> Panel:
    """Build the large-format display used for results and scores."""
    body = Text(text, style=f"bold {style}" if style else "bold", justify="center")
    return Panel(body, expand=False, padding=(0, 4))


class _RichChannel(ABC):
    """Shared rendering for concrete channels."""

    def __init__(self, console: Console, prompt_text: str) -> None:
        self._console = console
        self._prompt_text = prompt_text
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def _emit(self, renderable: RenderableType, *, style: str | None = None, end: str = "\n") -> None:
        """Write one rendered item to the client."""

    def write_line(self, text: str | Text, style: str | None = None) -> None:
        self._emit(text, style=style)

    def write_error(self, text: str) -> None:
        self._emit(error_text(text))

    def write_emphasized(self, text: str, style: str | None = None) -> None:
        self._emit(emphasized(text, style))


class _WriterFile:
    """File-like adapter so a rich Console can print into an asyncio StreamWriter."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    def write(self, data: str) -> int:
        if not self._writer.is_closing():
            # Telnet-style clients expect CRLF line endings.
            self._writer.write(data.replace("\n", "\r\n").encode(ENCODING))
        return len(data)

    def flush(self) -> None:
        pass


class StreamChannel(_RichChannel):
    """Channel over an asyncio TCP connection."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        prompt_text: str = DEFAULT_PROMPT,
        width: int = 80,
    ) -> None:
        console = Console(
            file=_WriterFile(writer),
            force_terminal=True,
            color_system="standard",
            width=width,
            highlight=False,
        )
        super().__init__(console, prompt_text)
        self._reader = reader
        self._writer = writer

    def _emit(self, renderable: RenderableType, *, style: str | None = None, end: str = "\n") -> None:
        if self._closed:
            return
        self._console.print(renderable, style=style, end=end, markup=False)

    async def readline(self) -> str:
        """Flush pending output and wait for the next line from the peer.

        A line over the reader limit is discarded and reported as LineTooLong.
        """
        if self._closed:
            raise ChannelClosed()
        try:
            await self._writer.drain()
            data = await self._reader.readline()
        except ConnectionError as exc:
            self.close()
            raise ChannelClosed() from exc
        except ValueError as exc:
            raise LineTooLong() from exc
        if not data:
            self.close()
            raise ChannelClosed()
        return data.decode(ENCODING, errors="replace").strip()

    async def ask(self, prompt: str, default: str | None = None) -> str:
        """Show a red prompt and wait for the answer; `default` is not pre-filled over TCP."""
        self._emit(Text(prompt, style="red"), end="")
        return await self.readline()

    def prompt(self) -> None:
        self._emit(Text(self._prompt_text), end="")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()

    @property
    def peer(self) -> str:
        address = self._writer.get_extra_info("peername")
        if isinstance(address, tuple) and len(address) >= 2:
            return f"{address[0]}:{address[1]}"
        return str(address)


class ConsoleChannel(_RichChannel):
    """Channel over injected input/print functions, used by the local shell."""

    def __init__(
        self,
        input_fn: InputFn = input,
        print_fn: PrintFn = print,
        *,
        console: Console | None = None,
        prompt_text: str = DEFAULT_PROMPT,
    ) -> None:
        super().__init__(console or Console(highlight=False), prompt_text)
        self._input_fn = input_fn
        self._print_fn = print_fn
        self._armed = False
        self._prefill = input_fn is input and sys.stdin.isatty()

    def _render(self, renderable: RenderableType, style: str | None = None) -> str:
        with self._console.capture() as capture:
            self._console.print(renderable, style=style, end="", markup=False)
        return capture.get()

    def _emit(self, renderable: RenderableType, *, style: str | None = None, end: str = "\n") -> None:
        if self._closed:
            return
        self._print_fn(self._render(renderable, style).rstrip("\n"))

    async def readline(self) -> str:
        if self._closed:
            raise ChannelClosed()
        prompt_text = self._prompt_text if self._armed else ""
        self._armed = False
        return self._read(prompt_text)

    async def ask(self, prompt: str, default: str | None = None) -> str:
        if self._closed:
            raise ChannelClosed()
        rendered = self._render(Text(prompt, style="red"))
        if default and self._prefill:
            return self._read_prefilled(rendered, default)
        return self._read(rendered)

    def _read(self, prompt_text: str) -> str:
        try:
            return self._input_fn(prompt_text).strip()
        except EOFError as exc:
            self.close()
            raise ChannelClosed() from exc

    def _read_prefilled(self, prompt_text: str, default: str) -> str:
        """Read a line with `default` already typed into the terminal buffer."""
        try:
            import readline
        except ImportError:  # pragma: no cover
            return self._read(prompt_text)
        readline.set_startup_hook(lambda: readline.insert_text(default))
        try:
            return self._read(prompt_text)
        finally:
            readline.set_startup_hook()

    def prompt(self) -> None:
        if not self._closed:
            self._armed = True

    def close(self) -> None:
        self._closed = True
