"""
Builders for raw EPMD responses, as EPMD would put them on the wire.
"""

import struct

from epmdlib.epmd.constants import (
    ALIVE_RESP,
    ALIVE2_X_RESP,
    PORT2_RESP,
    NODE_TYPE_NORMAL,
    PROTOCOL_IPV4,
    HIGHEST_VERSION,
    LOWEST_VERSION,
)


def create_alive_resp(result: int, creation: int = 1) -> bytes:
    """ALIVE_RESP with a 2-byte creation"""
    return struct.pack('>BBH', ALIVE_RESP, result, creation)


def create_alive2_x_resp(result: int, creation: int = 1) -> bytes:
    """ALIVE2_X_RESP with a 4-byte creation"""
    return struct.pack('>BBI', ALIVE2_X_RESP, result, creation)


def create_port2_resp(
    result: int,
    node_name: str,
    port: int,
    highest_version: int = HIGHEST_VERSION,
    lowest_version: int = LOWEST_VERSION,
    node_type: int = NODE_TYPE_NORMAL,
    extra: bytes = b'',
) -> bytes:
    name = node_name.encode('utf-8')
    return (
        struct.pack('>BBHBBHHH', PORT2_RESP, result, port, node_type, PROTOCOL_IPV4,
                    highest_version, lowest_version, len(name))
        + name
        + struct.pack('>H', len(extra))
        + extra
    )


def create_names_or_dump_resp(nodes: list) -> bytes:
    return '\n'.join(nodes).encode('utf-8')
