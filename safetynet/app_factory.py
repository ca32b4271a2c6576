"""Entry point for uvicorn/gunicorn: `uvicorn safetynet.app_factory:app`."""
from safetynet.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
