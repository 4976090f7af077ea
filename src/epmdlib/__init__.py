"""
epmdlib - Erlang Port Mapper Daemon client

Register nodes with EPMD, look up their ports and list what's registered.
The protocol codec lives in epmdlib.epmd; epmdlib.client drives it over
asyncio streams.
"""

from epmdlib.config import EPMDConfig
from epmdlib.client import (
    AsyncIOEPMDClient,
    AsyncIOEPMD,
    get_node,
    get_all_nodes,
    dump_epmd,
)

__all__ = [
    'EPMDConfig',
    'AsyncIOEPMDClient',
    'AsyncIOEPMD',
    'get_node',
    'get_all_nodes',
    'dump_epmd',
]
