"""
AsyncIO EPMD client.

Owns one stream connection to one EPMD, writes wrapped request frames,
reads back exactly one response per request and runs it through the
decoder and dispatcher.

EPMD keeps the connection of an ALIVE2_REQ open for as long as the node
stays registered; every other request is answered once and the connection
is closed by EPMD. The client reconnects on the next request when that
happens.

Example:
    async with AsyncIOEPMDClient() as client:
        info = await client.get_node("myapp")
        print(info.port)
"""

import asyncio
import inspect
import logging
from typing import List, Optional, Tuple

from epmdlib.config import EPMDConfig
from epmdlib.epmd import encoder
from epmdlib.epmd.constants import (
    CREATION_SIZE,
    EPMD_PORT_PREFIX_SIZE,
    NODE_TYPE_NORMAL,
)
from epmdlib.epmd.data import (
    AliveAck,
    PortInfo,
    NodeEntry,
    ProtocolStatusError,
    MalformedFrameError,
)
from epmdlib.epmd.dispatch import dispatch_frame, ALIVE, NODE, NODEINFO
from epmdlib.epmd.protocol import EventListener

logger = logging.getLogger(__name__)

class AsyncIOEPMDClient:
    """
    EPMD client for asyncio.

    Requests on one client are serialized; the protocol has no request ids,
    so a second request only goes out once the first has been answered.
    """

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 config: Optional[EPMDConfig] = None):
        self.config = (config or EPMDConfig.from_env()).with_overrides(host=host, port=port)
        self.host = self.config.host
        self.port = self.config.port
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._listener: Optional[EventListener] = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    def set_event_listener(self, handler: Optional[EventListener]) -> None:
        self._listener = handler

    async def connect(self) -> None:
        if self.connected:
            return
        self._reader, self._writer = await asyncio.wait_for(
            asyncio.open_connection(self.host, self.port),
            timeout=self.config.connect_timeout,
        )
        logger.info(f"Connected to EPMD at {self.host}:{self.port}")

    async def close(self) -> None:
        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except ConnectionError:
            pass
        logger.info(f"Closed EPMD connection to {self.host}:{self.port}")

    async def __aenter__(self) -> 'AsyncIOEPMDClient':
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # =========================================================================
    # Requests
    # =========================================================================

    async def register(self, port: int, name: str, node_type: int = NODE_TYPE_NORMAL) -> AliveAck:
        request = encoder.encode_register(port, name, node_type=node_type)
        async with self._lock:
            logger.debug(f"> ALIVE2_REQ name={name} port={port}")
            await self._send(request)
            frame = await self._read_alive_frame()
            return await self._handle(frame, ALIVE)

    async def get_node(self, name: str) -> PortInfo:
        request = encoder.encode_query_port(name)
        async with self._lock:
            logger.debug(f"> PORT_PLEASE2_REQ name={name}")
            await self._send(request)
            frame = await self._read_until_closed()
            return await self._handle(frame, NODE)

    async def get_all_nodes(self) -> List[NodeEntry]:
        async with self._lock:
            logger.debug("> NAMES_REQ")
            await self._send(encoder.encode_list_names())
            frame = await self._read_listing()
            nodes = await self._handle(frame, NODEINFO)
            return nodes.entries

    async def dump_epmd(self) -> List[NodeEntry]:
        async with self._lock:
            logger.debug("> DUMP_REQ")
            await self._send(encoder.encode_dump())
            frame = await self._read_listing()
            nodes = await self._handle(frame, NODEINFO)
            return nodes.entries

    async def kill_epmd(self) -> None:
        async with self._lock:
            logger.debug("> KILL_REQ")
            await self._send(encoder.encode_kill())
            reply = await self._read_until_closed()
            logger.debug(f"< KILL_RESP {reply!r}")

    # =========================================================================
    # Transport
    # =========================================================================

    async def _send(self, request: bytes) -> None:
        await self.connect()
        frame = encoder.wrap_frame(request)
        logger.debug(f"SEND {frame.hex()}")
        self._writer.write(frame)
        await self._writer.drain()

    async def _read_alive_frame(self) -> bytes:
        """Read ALIVE_RESP / ALIVE2_X_RESP: opcode, status, then creation on success"""
        header = await self._reader.readexactly(2)
        code, status = header[0], header[1]
        if status != 0 or code not in CREATION_SIZE:
            return header
        return header + await self._reader.readexactly(CREATION_SIZE[code])

    async def _read_until_closed(self) -> bytes:
        """Read a response EPMD terminates by closing the connection"""
        try:
            data = await self._reader.read()
        finally:
            await self.close()
        return data

    async def _read_listing(self) -> bytes:
        """Read a NAMES/DUMP reply: EPMD's port as a u32, then text until closed"""
        try:
            epmd_port = await self._reader.readexactly(EPMD_PORT_PREFIX_SIZE)
        except asyncio.IncompleteReadError as e:
            await self.close()
            raise MalformedFrameError(f"EPMD closed before sending its port: {e.partial!r}") from e
        return epmd_port + await self._read_until_closed()

    async def _handle(self, frame: bytes, expected: str):
        logger.debug(f"RECV {frame.hex()}")
        event = dispatch_frame(frame)
        logger.debug(f"< {event.name}")

        if self._listener is not None:
            result = self._listener(event)
            if inspect.isawaitable(result):
                await result

        if event.is_error:
            raise event.payload
        if event.name != expected:
            raise MalformedFrameError(f"Expected {expected} response, got {event.name}")
        return event.payload


class AsyncIOEPMD:
    """One-shot EPMD operations, one connection each."""

    @staticmethod
    async def register_and_keep_alive(
        node_name: str,
        port: int,
        host: Optional[str] = None,
        epmd_port: Optional[int] = None,
        node_type: int = NODE_TYPE_NORMAL,
    ) -> Tuple[AsyncIOEPMDClient, int]:
        """
        Register node and keep the connection open.

        Closing the returned client unregisters the node.

        Returns:
            (client, creation)
        """
        client = AsyncIOEPMDClient(host, epmd_port)
        try:
            ack = await client.register(port, node_name, node_type=node_type)
        except BaseException:
            await client.close()
            raise
        logger.info(f"Registered '{node_name}' with EPMD on port {port} (creation={ack.creation_number})")
        return client, ack.creation_number

    @staticmethod
    async def lookup(node_name: str, host: Optional[str] = None,
                     epmd_port: Optional[int] = None) -> Optional[PortInfo]:
        """Look up node via EPMD, returns None if it isn't registered"""
        try:
            return await get_node(node_name, host, epmd_port)
        except ProtocolStatusError:
            return None


async def get_node(name: str, host: Optional[str] = None, port: Optional[int] = None) -> PortInfo:
    """Get the PortInfo of a node from EPMD"""
    async with AsyncIOEPMDClient(host, port) as client:
        return await client.get_node(name)


async def get_all_nodes(host: Optional[str] = None, port: Optional[int] = None) -> List[NodeEntry]:
    """Get all nodes registered with EPMD"""
    async with AsyncIOEPMDClient(host, port) as client:
        return await client.get_all_nodes()


async def dump_epmd(host: Optional[str] = None, port: Optional[int] = None) -> List[NodeEntry]:
    """Dump all nodes EPMD knows about"""
    async with AsyncIOEPMDClient(host, port) as client:
        return await client.dump_epmd()
