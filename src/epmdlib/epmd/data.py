"""
EPMD Data Types

Decoded response values and the errors raised by the codec.
All values are transient: built by a single decode call and handed to the caller.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from epmdlib.epmd.constants import NODE_TYPE_HIDDEN


@dataclass
class Response:
    """Base class for decoded binary responses"""
    code: Optional[int]


@dataclass
class AliveAck(Response):
    """ALIVE_RESP / ALIVE2_X_RESP with status 0"""
    creation: bytes

    @property
    def creation_number(self) -> int:
        """Creation as an unsigned integer (2 or 4 bytes, big-endian)"""
        return int.from_bytes(self.creation, byteorder='big')


@dataclass
class PortInfo(Response):
    """PORT2_RESP with status 0"""
    port: int
    node_type: int
    protocol: int
    highest_version: int
    lowest_version: int
    name: str
    extra: bytes = b''

    @property
    def hidden(self) -> bool:
        return self.node_type == NODE_TYPE_HIDDEN


@dataclass
class NodeEntry:
    """One line of a names or dump listing"""
    name: str
    port: int
    fd: Optional[int] = None


@dataclass
class NodeList(Response):
    """
    Text listing returned for NAMES_REQ and DUMP_REQ.

    Carries no opcode; ``code`` is always None. ``epmd_port`` is the port
    EPMD reported ahead of the listing, when it did.
    """
    code: Optional[int] = None
    entries: List[NodeEntry] = field(default_factory=list)
    epmd_port: Optional[int] = None

    def __iter__(self) -> Iterator[NodeEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> NodeEntry:
        return self.entries[index]


class EPMDError(Exception):
    """Base exception for EPMD codec errors."""
    pass


class ProtocolStatusError(EPMDError):
    """Raised when EPMD answers a request with a non-zero status byte."""

    def __init__(self, code: int, status: int):
        self.code = code
        self.status = status
        super().__init__(f"EPMD response {code} failed with status {status}")


class VersionRangeError(EPMDError):
    """Raised when a node's distribution versions don't overlap ours."""

    def __init__(self, highest_version: int, lowest_version: int):
        self.highest_version = highest_version
        self.lowest_version = lowest_version
        super().__init__(
            f"Unsupported distribution version range {lowest_version}..{highest_version}"
        )


class MalformedFrameError(EPMDError):
    """Raised when a frame is truncated or can't be interpreted."""
    pass


class InvalidRequestError(EPMDError):
    """Raised when request fields can't be encoded."""
    pass
