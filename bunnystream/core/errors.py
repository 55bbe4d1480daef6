"""Exception hierarchy for the Bunny Stream client."""


class StreamError(Exception):
    """Base exception class for bunnystream errors."""

    pass


class ConfigError(StreamError):
    """Configuration-related errors."""

    pass


class ValidationError(StreamError):
    """Input rejected before any request is sent."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class LocalFileError(StreamError):
    """A local file needed for the request is missing or unreadable."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class TransportError(StreamError):
    """Network failure before a response was received (DNS, connect, timeout)."""

    pass


class RequestError(StreamError):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthenticationError(RequestError):
    """The access key was rejected (HTTP 401)."""

    def __init__(self, access_key: str):
        super().__init__(f"Authentication failed for access key {access_key}.", status_code=401)
        self.access_key = access_key


class BadRequestError(RequestError):
    """The API rejected the request payload (HTTP 400)."""

    def __init__(self, message: str, errors: list | None = None, body: str | None = None):
        super().__init__(message, status_code=400, body=body)
        self.errors = errors or []


class NotFoundError(RequestError):
    """The requested resource does not exist (HTTP 404)."""

    def __init__(self, message: str = "Resource not found.", resource_id: str | None = None):
        super().__init__(message, status_code=404)
        self.resource_id = resource_id


class VideoNotFoundError(NotFoundError):
    """No video with the given id in this library."""

    def __init__(self, video_id: str):
        super().__init__(f"Video '{video_id}' not found.", resource_id=video_id)


class CollectionNotFoundError(NotFoundError):
    """No collection with the given id in this library."""

    def __init__(self, collection_id: str):
        super().__init__(f"Collection '{collection_id}' not found.", resource_id=collection_id)
