"""Abstract base classes for the fill engine's collaborators."""

from slashfill.interfaces.connectivity import BaseConnectivity, ConnectivityStatus, NotConnectedError
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.note_store import BaseNoteStore, Note
from slashfill.interfaces.transport import BaseTransport, TransportError

__all__ = [
    "BaseTransport",
    "TransportError",
    "BaseConnectivity",
    "ConnectivityStatus",
    "NotConnectedError",
    "BaseFillStrategy",
    "BaseNoteStore",
    "Note",
]
