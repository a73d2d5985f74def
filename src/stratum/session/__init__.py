"""Session: the request-scoped batch coordinator.

Architecture Note:
    session/ is a stateful service layer. Unlike core/ (stateless identity
    and error primitives), a Session owns its local cache tier and
    orchestrates calls against the shared cache and durable store.
"""

from stratum.session.session import Session
from stratum.session.sync_runner import SyncRunner

__all__ = [
    "Session",
    "SyncRunner",
]
