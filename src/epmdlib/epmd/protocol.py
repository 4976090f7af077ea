"""
EPMD client interfaces.

Defines contracts for EPMD client implementations and event listeners.
Backend-agnostic - no asyncio or other runtime dependencies.
"""

from typing import Protocol, Any, Awaitable, List, Optional, Union, runtime_checkable

from epmdlib.epmd.constants import NODE_TYPE_NORMAL
from epmdlib.epmd.data import AliveAck, PortInfo, NodeEntry

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from epmdlib.epmd.dispatch import Event


class EventListener(Protocol):
    """Callback receiving every dispatched response, including errors."""

    def __call__(self, event: 'Event') -> Union[None, Awaitable[None]]:
        ...


@runtime_checkable
class EPMDClientProtocol(Protocol):
    """
    Protocol for an EPMD client owning one connection to one EPMD.

    One request is in flight at a time: each call sends a frame and waits
    for exactly one response before returning.
    """

    host: str
    port: int

    async def connect(self) -> None:
        """Open the connection to EPMD."""
        ...

    async def close(self) -> None:
        """Close the connection. Unregisters the node if register() was used."""
        ...

    def set_event_listener(self, handler: Optional[EventListener]) -> None:
        """
        Set callback invoked with each dispatched Event.

        Args:
            handler: Sync or async callable taking an Event, or None to clear
        """
        ...

    async def register(self, port: int, name: str, node_type: int = NODE_TYPE_NORMAL) -> AliveAck:
        """
        Register a node with EPMD (ALIVE2_REQ).

        The registration lasts as long as the connection stays open.

        Args:
            port: Distribution port of the node
            name: Short node name (no host part)
            node_type: NODE_TYPE_NORMAL or NODE_TYPE_HIDDEN

        Returns:
            AliveAck carrying the creation assigned by EPMD

        Raises:
            ProtocolStatusError: If EPMD refused the registration
        """
        ...

    async def get_node(self, name: str) -> PortInfo:
        """
        Look up a node's port (PORT_PLEASE2_REQ).

        Raises:
            ProtocolStatusError: If the node isn't registered
            VersionRangeError: If the node speaks no version we support
        """
        ...

    async def get_all_nodes(self) -> List[NodeEntry]:
        """List registered nodes (NAMES_REQ)."""
        ...

    async def dump_epmd(self) -> List[NodeEntry]:
        """Dump all nodes EPMD knows about, with file descriptors (DUMP_REQ)."""
        ...

    async def kill_epmd(self) -> None:
        """Stop EPMD (KILL_REQ). Use with caution."""
        ...


@runtime_checkable
class EPMDProtocol(Protocol):
    """Protocol for one-shot EPMD operations."""

    @staticmethod
    async def register_and_keep_alive(node_name: str, port: int) -> tuple[Any, int]:
        """Register node with EPMD, returns (open client, creation number)."""
        ...

    @staticmethod
    async def lookup(node_name: str) -> Optional[PortInfo]:
        """Look up node via EPMD, returns PortInfo or None."""
        ...
