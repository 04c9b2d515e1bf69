"""HTTP API for Participa components."""

from .main import create_app, mount_components

__all__ = ["create_app", "mount_components"]
