"""HTTP API package."""

from shopledger.api.app import create_app, register_exception_handlers

__all__ = ["create_app", "register_exception_handlers"]
