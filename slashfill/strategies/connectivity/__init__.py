"""Concrete connectivity check implementations."""

from slashfill.strategies.connectivity.openrouter import OpenRouterConnectivity, ProxyConnectivity

__all__ = [
    "OpenRouterConnectivity",
    "ProxyConnectivity",
]
