from .session import ConnectionSession
from .settings import ConnectionSettings
from .connection_state import ConnectionState

__all__ = ["ConnectionSession", "ConnectionSettings", "ConnectionState"]
