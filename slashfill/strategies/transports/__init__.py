"""Concrete completion transport implementations."""

from slashfill.strategies.transports.openrouter import OpenRouterTransport
from slashfill.strategies.transports.proxy import ProxyTransport

__all__ = [
    "OpenRouterTransport",
    "ProxyTransport",
]
