"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from slashfill.core.factory import ComponentFactory


def get_component_factory(request: Request) -> ComponentFactory:
    """Return the factory stored on the application at startup."""
    return request.app.state.factory
