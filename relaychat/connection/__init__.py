from .outbound import OutboundQueue
from .heartbeat import HeartbeatMonitor
from .scheduler import ReconnectScheduler
from .transport import Opener, Socket, websocket_opener
from .state_machine import ConnectionStateMachine
from .auth import TokenProvider, build_url, resolve_token

__all__ = [
    "ConnectionStateMachine",
    "HeartbeatMonitor",
    "Opener",
    "OutboundQueue",
    "ReconnectScheduler",
    "Socket",
    "TokenProvider",
    "build_url",
    "resolve_token",
    "websocket_opener",
]
