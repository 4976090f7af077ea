# epmdlib/epmd/decoder.py
"""
EPMD response decoder.

Takes one complete response (no length prefix; EPMD doesn't send one)
and returns AliveAck, PortInfo or NodeList, or raises an EPMDError.

ALIVE_RESP / ALIVE2_X_RESP:
    +---+------+--------+
    |1  |1     |2 or 4  |
    +---+------+--------+
    |121|Result|Creation|
    +---+------+--------+

PORT2_RESP:
    +---+------+------+--------+--------+-------+-------+----+--------+----+-----+
    |1  |1     |2     |1       |1       |2      |2      |2   |Nlen    |2   |Elen |
    +---+------+------+--------+--------+-------+-------+----+--------+----+-----+
    |119|Result|PortNo|NodeType|Protocol|Highest|Lowest |Nlen|NodeName|Elen|Extra|
    +---+------+------+--------+--------+-------+-------+----+--------+----+-----+

Anything else is treated as a NAMES/DUMP text listing, optionally opened
by EPMD's own port as a u32.
"""

import struct
from typing import List, Optional, Union

from epmdlib.epmd.constants import (
    ALIVE_RESP,
    ALIVE2_X_RESP,
    PORT2_RESP,
    HIGHEST_VERSION,
    LOWEST_VERSION,
    NODE_REGEXP,
    CREATION_SIZE,
)
from epmdlib.epmd.data import (
    AliveAck,
    PortInfo,
    NodeEntry,
    NodeList,
    ProtocolStatusError,
    VersionRangeError,
    MalformedFrameError,
)


class EPMDDecoder:
    """Decode a single EPMD response"""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.pos = 0

    def decode(self) -> Union[AliveAck, PortInfo, NodeList]:
        if not self.data:
            raise MalformedFrameError("Empty EPMD response")

        code = self.data[0]
        if code in (ALIVE_RESP, ALIVE2_X_RESP):
            return self.decode_alive()
        elif code == PORT2_RESP:
            return self.decode_port2()
        else:
            return self.decode_names()

    def read_bytes(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise MalformedFrameError(
                f"Unexpected end of EPMD response: need {n} bytes at offset {self.pos}, "
                f"have {len(self.data) - self.pos}"
            )
        data = self.data[self.pos:self.pos + n]
        self.pos += n
        return data

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16(self) -> int:
        return struct.unpack('>H', self.read_bytes(2))[0]

    def read_u32(self) -> int:
        return struct.unpack('>I', self.read_bytes(4))[0]

    def read_status(self) -> int:
        code = self.read_u8()
        status = self.read_u8()
        if status != 0:
            raise ProtocolStatusError(code, status)
        return code

    def decode_alive(self) -> AliveAck:
        code = self.read_status()
        creation = self.read_bytes(CREATION_SIZE[code])
        return AliveAck(code=code, creation=creation)

    def decode_port2(self) -> PortInfo:
        code = self.read_status()
        port = self.read_u16()
        node_type = self.read_u8()
        protocol = self.read_u8()
        highest_version = self.read_u16()
        lowest_version = self.read_u16()

        # The node's range must overlap [LOWEST_VERSION, HIGHEST_VERSION]
        if highest_version < LOWEST_VERSION or lowest_version > HIGHEST_VERSION:
            raise VersionRangeError(highest_version, lowest_version)

        name_length = self.read_u16()
        try:
            name = self.read_bytes(name_length).decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedFrameError(f"Node name is not valid UTF-8: {e}") from e
        extra_length = self.read_u16()
        extra = self.read_bytes(extra_length)

        return PortInfo(
            code=code,
            port=port,
            node_type=node_type,
            protocol=protocol,
            highest_version=highest_version,
            lowest_version=lowest_version,
            name=name,
            extra=extra,
        )

    def decode_names(self) -> NodeList:
        # Text never starts with NUL; a leading 00 00 is the u32 EPMD port
        epmd_port = None
        if self.data[:2] == b'\x00\x00':
            epmd_port = self.read_u32()

        try:
            text = self.data[self.pos:].decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedFrameError(f"Unrecognized EPMD response: {e}") from e
        self.pos = len(self.data)

        entries: List[NodeEntry] = []
        for line in text.splitlines():
            if not line.strip():
                continue
            entry = parse_node_line(line)
            if entry is not None:
                entries.append(entry)
        return NodeList(entries=entries, epmd_port=epmd_port)


def parse_node_line(line: str) -> Optional[NodeEntry]:
    """Parse one listing line; returns None if it doesn't describe a node"""
    match = NODE_REGEXP.match(line)
    if match is None:
        return None
    fd = match.group(4)
    return NodeEntry(
        name=match.group(1),
        port=int(match.group(2)),
        fd=int(fd) if fd is not None else None,
    )


def decode(data: bytes) -> Union[AliveAck, PortInfo, NodeList]:
    """Decode one EPMD response"""
    return EPMDDecoder(data).decode()
