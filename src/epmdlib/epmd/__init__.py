"""
EPMD protocol codec.

Stateless encoding of requests and decoding of responses; no sockets,
timers or logging live here.
"""

from epmdlib.epmd.data import (
    Response,
    AliveAck,
    PortInfo,
    NodeEntry,
    NodeList,
    EPMDError,
    ProtocolStatusError,
    VersionRangeError,
    MalformedFrameError,
    InvalidRequestError,
)
from epmdlib.epmd.encoder import (
    wrap_frame,
    encode_register,
    encode_query_port,
    encode_list_names,
    encode_dump,
    encode_kill,
)
from epmdlib.epmd.decoder import decode, EPMDDecoder
from epmdlib.epmd.dispatch import Event, dispatch, dispatch_frame, EVENT_MAP

__all__ = [
    # Responses
    'Response',
    'AliveAck',
    'PortInfo',
    'NodeEntry',
    'NodeList',

    # Errors
    'EPMDError',
    'ProtocolStatusError',
    'VersionRangeError',
    'MalformedFrameError',
    'InvalidRequestError',

    # Encoder
    'wrap_frame',
    'encode_register',
    'encode_query_port',
    'encode_list_names',
    'encode_dump',
    'encode_kill',

    # Decoder
    'decode',
    'EPMDDecoder',

    # Dispatcher
    'Event',
    'dispatch',
    'dispatch_frame',
    'EVENT_MAP',
]
