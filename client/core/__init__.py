from .network import ConnectionManager, ConnectionState
from .session import IdentityState

__all__ = ["ConnectionManager", "ConnectionState", "IdentityState"]
