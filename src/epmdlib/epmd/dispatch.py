"""
Response dispatch.

Maps a decoded response to the event a client reacts to:

    ALIVE_RESP, ALIVE2_X_RESP  ->  "alive"
    PORT2_RESP                 ->  "node"
    text listing (no opcode)   ->  "nodeinfo"
    decode failure             ->  "error"
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from epmdlib.epmd.constants import ALIVE_RESP, ALIVE2_X_RESP, PORT2_RESP
from epmdlib.epmd.data import Response, NodeList, EPMDError
from epmdlib.epmd.decoder import decode

ALIVE = "alive"
NODE = "node"
NODEINFO = "nodeinfo"
ERROR = "error"

EVENT_MAP: Dict[int, str] = {
    ALIVE_RESP: ALIVE,
    ALIVE2_X_RESP: ALIVE,
    PORT2_RESP: NODE,
}


@dataclass
class Event:
    """A dispatched response: event name plus decoded payload or the error"""
    name: str
    payload: Any

    @property
    def is_error(self) -> bool:
        return self.name == ERROR


def dispatch(result: Union[Response, Exception]) -> Event:
    """Map a decoded response (or a decode failure) to its Event"""
    match result:
        case Exception():
            return Event(ERROR, result)
        case NodeList():
            return Event(NODEINFO, result)
        case Response(code=code) if code in EVENT_MAP:
            return Event(EVENT_MAP[code], result)
        case _:
            raise ValueError(f"No event for response: {result!r}")


def dispatch_frame(data: bytes) -> Event:
    """Decode one frame and dispatch it; codec errors become error events"""
    try:
        response = decode(data)
    except EPMDError as e:
        return Event(ERROR, e)
    return dispatch(response)
