"""HTTP routes for the callable endpoint."""

from .routes import callable_error_handler, router

__all__ = ["callable_error_handler", "router"]
