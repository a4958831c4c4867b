"""Transports - how event batches reach the collector."""

from .base import Transport
from .console import ConsoleTransport
from .http import HttpTransport

__all__ = [
    "Transport",
    "ConsoleTransport",
    "HttpTransport",
]
