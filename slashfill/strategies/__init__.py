"""Concrete strategy implementations."""

from slashfill.strategies.connectivity import (
    OpenRouterConnectivity,
    ProxyConnectivity,
)
from slashfill.strategies.fill import (
    BatchFillStrategy,
    InlineFillStrategy,
    SequentialFillStrategy,
)
from slashfill.strategies.transports import (
    OpenRouterTransport,
    ProxyTransport,
)

__all__ = [
    "OpenRouterConnectivity",
    "ProxyConnectivity",
    "BatchFillStrategy",
    "InlineFillStrategy",
    "SequentialFillStrategy",
    "OpenRouterTransport",
    "ProxyTransport",
]
