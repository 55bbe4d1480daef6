"""bunnystream - Python client for the Bunny Stream video API.

Example:
    >>> from bunnystream import StreamClient, StreamConfig
    >>> client = StreamClient(StreamConfig(api_key="KEY", library_id="12345"))
    >>> video = client.create_video("Holiday")
    >>> client.upload_video_with_video_id(video["guid"], "holiday.mp4")
"""

from .api import StreamClient
from .config.settings import (
    DEFAULT_BASE_URL,
    BunnyStreamSettings,
    ConfigManager,
    StreamConfig,
    load_settings,
)
from .core.errors import (
    AuthenticationError,
    BadRequestError,
    CollectionNotFoundError,
    ConfigError,
    LocalFileError,
    NotFoundError,
    RequestError,
    StreamError,
    TransportError,
    ValidationError,
    VideoNotFoundError,
)
from .core.models import CleanupOptions, OutputCodec, TranscriptionOptions

__version__ = "1.0.0"
__all__ = [
    # Client
    "StreamClient",
    # Configuration
    "StreamConfig",
    "BunnyStreamSettings",
    "ConfigManager",
    "load_settings",
    "DEFAULT_BASE_URL",
    # Options
    "OutputCodec",
    "TranscriptionOptions",
    "CleanupOptions",
    # Errors
    "StreamError",
    "ConfigError",
    "ValidationError",
    "LocalFileError",
    "TransportError",
    "RequestError",
    "AuthenticationError",
    "BadRequestError",
    "NotFoundError",
    "VideoNotFoundError",
    "CollectionNotFoundError",
]
