"""
Shared fixtures for EPMD client tests.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest_asyncio

from epmdlib.epmd.constants import ALIVE2_REQ


@dataclass
class FakeEPMD:
    """
    In-process stand-in for EPMD.

    Answers each request with the bytes scripted for its opcode. Like EPMD,
    it keeps ALIVE2_REQ connections open until the client goes away and
    closes every other connection after answering.
    """
    responses: Dict[int, bytes] = field(default_factory=dict)
    requests: List[bytes] = field(default_factory=list)
    server: Optional[asyncio.Server] = None
    port: Optional[int] = None
    registrations_closed: asyncio.Event = field(default_factory=asyncio.Event)

    async def start(self):
        self.server = await asyncio.start_server(self._handle, '127.0.0.1', 0)
        self.port = self.server.sockets[0].getsockname()[1]

    async def stop(self):
        self.server.close()
        await self.server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        try:
            header = await reader.readexactly(2)
            length = int.from_bytes(header, 'big')
            request = await reader.readexactly(length)
            self.requests.append(header + request)

            writer.write(self.responses.get(request[0], b''))
            await writer.drain()

            if request[0] == ALIVE2_REQ:
                # Registration lives as long as the connection
                await reader.read()
                self.registrations_closed.set()
        except asyncio.IncompleteReadError:
            pass
        finally:
            writer.close()


@pytest_asyncio.fixture
async def epmd():
    """Fake EPMD listening on an ephemeral port."""
    server = FakeEPMD()
    await server.start()

    yield server

    await server.stop()
