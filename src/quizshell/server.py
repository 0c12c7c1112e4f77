"""Session loop and asyncio TCP server."""

from __future__ import annotations

import asyncio

from loguru import logger

from .channel import Channel, StreamChannel
from .config import Settings
from .dispatcher import Dispatcher
from .errors import ChannelClosed, QuizError
from .seed import load_seed_quizzes
from .store import QuizStore


def open_store(settings: Settings) -> QuizStore:
    """Open the quiz database, seeding it once when empty."""
    store = QuizStore(settings.db_path)
    if settings.seed:
        added = store.ensure_seeded(load_seed_quizzes())
        if added:
            logger.info("Seeded {} quizzes into {}", added, settings.db_path)
    return store


async def run_session(dispatcher: Dispatcher, channel: Channel) -> None:
    """Read and dispatch one command line at a time until the channel closes."""
    channel.prompt()
    try:
        while not channel.closed:
            try:
                line = await channel.readline()
            except QuizError as exc:
                logger.warning("Unreadable command line: {}", exc)
                channel.write_error(str(exc))
                channel.prompt()
                continue
            await dispatcher.dispatch(channel, line)
    except ChannelClosed:
        logger.debug("Channel closed by peer")


async def start_server(dispatcher: Dispatcher, host: str, port: int) -> asyncio.Server:
    """Start listening; each connection gets its own channel and session."""

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        channel = StreamChannel(reader, writer)
        peer = channel.peer
        logger.info("Client connected: {}", peer)
        try:
            await run_session(dispatcher, channel)
        finally:
            channel.close()
            logger.info("Client disconnected: {}", peer)

    return await asyncio.start_server(handle, host, port)


async def serve(settings: Settings) -> None:
    """Serve quiz sessions over TCP until cancelled."""
    store = open_store(settings)
    try:
        server = await start_server(Dispatcher(store), settings.host, settings.port)
        for sock in server.sockets:
            logger.info("Listening on {}", sock.getsockname())
        async with server:
            await server.serve_forever()
    finally:
        store.close()
        logger.info("Server stopped")
