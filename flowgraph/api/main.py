"""Application instance for uvicorn: ``uvicorn flowgraph.api.main:app``."""

from flowgraph.api.app import create_app

app = create_app()
