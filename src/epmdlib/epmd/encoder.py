# epmdlib/epmd/encoder.py
"""
EPMD request encoder.

Every request is sent preceded by a two-byte length field:

    +------+-------+
    |2     |n      |
    +------+-------+
    |Length|Request|
    +------+-------+

The encode_* functions build the Request part; wrap_frame() adds the Length.

Spec: https://www.erlang.org/doc/apps/erts/erl_dist_protocol.html
"""

import struct

from epmdlib.epmd.constants import (
    ALIVE2_REQ,
    PORT_PLEASE2_REQ,
    NAMES_REQ,
    DUMP_REQ,
    KILL_REQ,
    NODE_TYPE_NORMAL,
    NODE_TYPE_HIDDEN,
    PROTOCOL_IPV4,
    HIGHEST_VERSION,
    LOWEST_VERSION,
)
from epmdlib.epmd.data import InvalidRequestError

MAX_U16 = 0xFFFF


def _check_u16(value: int, what: str):
    if not 0 <= value <= MAX_U16:
        raise InvalidRequestError(f"{what} out of range: {value}")


def _encode_name(name: str) -> bytes:
    name_bytes = name.encode('utf-8')
    if not name_bytes:
        raise InvalidRequestError("Node name must not be empty")
    _check_u16(len(name_bytes), "Node name length")
    return name_bytes


def wrap_frame(payload: bytes) -> bytes:
    """Prefix a request with its big-endian u16 length"""
    _check_u16(len(payload), "Request length")
    return struct.pack('>H', len(payload)) + payload


def encode_register(port: int, name: str,
                    node_type: int = NODE_TYPE_NORMAL,
                    extra: bytes = b'') -> bytes:
    """
    ALIVE2_REQ: register a node with EPMD.

    +---+------+--------+--------+--------------+-------------+----+--------+----+-----+
    |1  |2     |1       |1       |2             |2            |2   |Nlen    |2   |Elen |
    +---+------+--------+--------+--------------+-------------+----+--------+----+-----+
    |120|PortNo|NodeType|Protocol|HighestVersion|LowestVersion|Nlen|NodeName|Elen|Extra|
    +---+------+--------+--------+--------------+-------------+----+--------+----+-----+

    Args:
        port: Port the node listens on for distribution connections
        name: Node name without the host part (e.g. "myapp")
        node_type: NODE_TYPE_NORMAL or NODE_TYPE_HIDDEN
        extra: Extra field, empty by default
    """
    _check_u16(port, "Port")
    if node_type not in (NODE_TYPE_NORMAL, NODE_TYPE_HIDDEN):
        raise InvalidRequestError(f"Unknown node type: {node_type}")
    name_bytes = _encode_name(name)
    _check_u16(len(extra), "Extra length")

    return (
        struct.pack('>BHBBHHH', ALIVE2_REQ, port, node_type, PROTOCOL_IPV4,
                    HIGHEST_VERSION, LOWEST_VERSION, len(name_bytes))
        + name_bytes
        + struct.pack('>H', len(extra))
        + bytes(extra)
    )


def encode_query_port(name: str) -> bytes:
    """
    PORT_PLEASE2_REQ: ask for the port of a named node.

    +---+--------+
    |1  |N       |
    +---+--------+
    |122|NodeName|
    +---+--------+

    No length field; the frame's length prefix carries the size.
    """
    return bytes([PORT_PLEASE2_REQ]) + _encode_name(name)


def encode_list_names() -> bytes:
    """NAMES_REQ: list all registered nodes"""
    return bytes([NAMES_REQ])


def encode_dump() -> bytes:
    """DUMP_REQ: dump everything EPMD knows about its nodes"""
    return bytes([DUMP_REQ])


def encode_kill() -> bytes:
    """KILL_REQ: stop EPMD"""
    return bytes([KILL_REQ])
