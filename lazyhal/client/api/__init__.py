"""Public API surface."""

from .binder import ResourceBinder
from .client import ApiClient, create_client

__all__ = ["ApiClient", "ResourceBinder", "create_client"]
