"""HTTP services for Daybook."""

from .server import create_app, run_local_server, serve_api

__all__ = ["create_app", "run_local_server", "serve_api"]
