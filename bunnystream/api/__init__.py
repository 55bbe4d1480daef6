"""API integration layer."""

from .stream_client import StreamClient

__all__ = ["StreamClient"]
