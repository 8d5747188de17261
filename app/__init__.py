"""PITR recovery-window API package."""

from importlib import import_module
from typing import Any


def create_app(*args: Any, **kwargs: Any):
    """Build the FastAPI app without importing routes at package import time."""
    return import_module("app.main").create_app(*args, **kwargs)


__all__ = ["create_app"]
