"""
Client configuration.

Where to find EPMD. Defaults follow Erlang's own: 127.0.0.1, port 4369,
overridable with ERL_EPMD_ADDRESS and ERL_EPMD_PORT.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from epmdlib.epmd.constants import EPMD_DEFAULT_PORT

DEFAULT_HOST = '127.0.0.1'
DEFAULT_CONNECT_TIMEOUT = 5.0


@dataclass(frozen=True)
class EPMDConfig:
    """Location of an EPMD instance."""
    host: str = DEFAULT_HOST
    port: int = EPMD_DEFAULT_PORT
    connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'EPMDConfig':
        """
        Build a config from ERL_EPMD_ADDRESS / ERL_EPMD_PORT.

        ERL_EPMD_ADDRESS may list several addresses separated by commas;
        the first one is used.

        :raises ValueError: If ERL_EPMD_PORT is not a valid port number
        """
        if environ is None:
            environ = os.environ

        host = DEFAULT_HOST
        address = environ.get('ERL_EPMD_ADDRESS', '').strip()
        if address:
            host = address.split(',')[0].strip()

        port = EPMD_DEFAULT_PORT
        port_str = environ.get('ERL_EPMD_PORT', '').strip()
        if port_str:
            port = int(port_str)
            if not 0 < port <= 0xFFFF:
                raise ValueError(f"Invalid ERL_EPMD_PORT: {port_str}")

        return cls(host=host, port=port)

    def with_overrides(self, host: Optional[str] = None, port: Optional[int] = None) -> 'EPMDConfig':
        """Copy with host/port replaced where given"""
        changes = {}
        if host is not None:
            changes['host'] = host
        if port is not None:
            changes['port'] = port
        return replace(self, **changes)
