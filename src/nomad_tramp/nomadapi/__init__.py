"""Nomad HTTP API client package.

Provides a lightweight, read-only HTTP client for the Nomad API that returns
validated allocation records with minimal processing. Address resolution and
completion are handled by the modules that consume it.

Exports:
    NomadApiClient: HTTP client with token authentication and error mapping.
    types: Module containing Pydantic models for API responses.
    DEFAULT_ADDRESS: Default Nomad API address.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .client import (
    DEFAULT_ADDRESS,
    DEFAULT_TIMEOUT,
    NomadApiClient,
)

__all__ = [
    "DEFAULT_ADDRESS",
    "DEFAULT_TIMEOUT",
    "NomadApiClient",
    "types",
]
