"""
UDP ingestion loop.

Receives hub broadcasts one datagram at a time, decodes and normalizes them
and appends observations to storage. Every per-datagram failure is logged and
the loop moves on to the next datagram; only failing to bind the receive
socket stops the listener.
"""

from __future__ import annotations

import asyncio
import socket
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from tempest.core import db
from tempest.core.config import MAX_UDP_PAYLOAD, Settings, settings as default_settings
from tempest.core.exceptions import DecodeError, ListenerStartupError, MalformedError
from tempest.core.init_db import init_db
from tempest.repositories.observation_repository import ObservationRepository
from tempest.schemas.weather import Weather
from tempest.services.decoder import decode
from tempest.services.normalizer import normalize

logger = structlog.get_logger(__name__)


class DatagramTransport(Protocol):
    """Source of raw datagrams; `receive` raises `OSError` on a network fault."""

    async def receive(self) -> bytes: ...


class StorageSink(Protocol):
    """Destination for normalized observations, e.g. `ObservationRepository`."""

    async def insert(self, weather: Weather) -> Any: ...


def payload_text(data: bytes) -> str:
    """Render a datagram for the log: the text itself if it is UTF-8, else hex."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return f"hex:{data.hex()}"


class UdpTransport:
    """Non-blocking UDP socket read from the running event loop."""

    def __init__(self, host: str, port: int, max_size: int = MAX_UDP_PAYLOAD):
        self.host = host
        self.port = port
        self.max_size = max_size
        self._sock: Optional[socket.socket] = None

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port); the port is the real one when 0 was requested."""
        if self._sock is None:
            return self.host, self.port
        return self._sock.getsockname()[:2]

    def open(self) -> None:
        """
        Bind the receive socket.

        Raises:
            ListenerStartupError: The address cannot be bound.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((self.host, self.port))
        except OSError as e:
            sock.close()
            raise ListenerStartupError(f"Unable to bind udp://{self.host}:{self.port}: {e}") from e
        sock.setblocking(False)
        self._sock = sock

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    async def receive(self) -> bytes:
        """Wait for the next datagram, with no timeout."""
        if self._sock is None:
            raise OSError("UDP transport is not open")
        loop = asyncio.get_running_loop()
        return await loop.sock_recv(self._sock, self.max_size)

    def __enter__(self) -> UdpTransport:
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


@dataclass
class IngestionStats:
    """Running counters for one ingestion loop."""

    received: int = 0
    stored: int = 0
    ignored: int = 0
    decode_failures: int = 0
    storage_failures: int = 0
    transport_errors: int = 0


class IngestionLoop:
    """
    Receive -> decode -> normalize -> store, one datagram at a time.

    The next datagram is not received until the current one has been fully
    handled, so datagrams are processed in the order the transport delivers
    them.
    """

    def __init__(self, transport: DatagramTransport, sink: StorageSink):
        self.transport = transport
        self.sink = sink
        self.stats = IngestionStats()

    async def step(self) -> Optional[Weather]:
        """
        Handle exactly one datagram or transport error.

        Returns:
            The observation that was stored, or None if nothing was stored.
        """
        try:
            data = await self.transport.receive()
        except OSError as e:
            self.stats.transport_errors += 1
            logger.error("transport.receive_failed", error=str(e))
            return None

        self.stats.received += 1

        try:
            packet = decode(data)
        except DecodeError as e:
            self.stats.decode_failures += 1
            logger.warning(
                "packet.malformed" if isinstance(e, MalformedError) else "packet.unparseable",
                variant=e.variant,
                detail=e.detail,
                length=len(data),
                payload=payload_text(data),
            )
            return None

        logger.debug("packet.decoded", packet_type=packet.type, packet=packet.model_dump(mode="json"))

        weather = normalize(packet)
        if weather is None:
            self.stats.ignored += 1
            return None

        try:
            await self.sink.insert(weather)
        except Exception as e:
            # The observation is dropped; there is no retry queue.
            self.stats.storage_failures += 1
            logger.error("storage.insert_failed", error=str(e), time_epoch=weather.time_epoch)
            return None

        self.stats.stored += 1
        logger.info("observation.stored", time_epoch=weather.time_epoch)
        return weather

    async def run_forever(self) -> None:
        """
        Process datagrams until the task is cancelled.
        """
        logger.info("ingestion.started")
        while True:
            try:
                await self.step()
            except Exception:
                logger.exception("ingestion.iteration_failed")


async def run_listener(
    settings: Settings = default_settings,
    engine: Optional[AsyncEngine] = None,
) -> None:
    """
    Bind the UDP endpoint, open storage and run the ingestion loop.

    Does not return under normal operation.

    Raises:
        ListenerStartupError: The UDP endpoint cannot be bound.
    """
    engine = engine or db.engine

    with UdpTransport(settings.listen_host, settings.listen_port, settings.max_datagram_size) as transport:
        host, port = transport.address
        logger.info("listener.bound", host=host, port=port)

        await init_db(engine)

        # The session is opened once and owned by the loop for its lifetime.
        async with db.session_factory(engine)() as session:
            loop = IngestionLoop(transport, ObservationRepository(session))
            await loop.run_forever()
