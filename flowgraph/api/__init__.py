"""HTTP API layer."""

from flowgraph.api.app import create_app

__all__ = ["create_app"]
