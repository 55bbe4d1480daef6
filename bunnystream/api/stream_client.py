"""Client for the Bunny Stream video API."""

import base64
import logging
from pathlib import Path
from typing import Any

import httpx

from ..config.settings import StreamConfig
from ..core.errors import (
    AuthenticationError,
    BadRequestError,
    CollectionNotFoundError,
    LocalFileError,
    NotFoundError,
    RequestError,
    StreamError,
    TransportError,
    ValidationError,
    VideoNotFoundError,
)
from ..core.models import (
    CleanupOptions,
    OutputCodec,
    RequestOptions,
    TranscriptionOptions,
    bool_param,
    drop_none,
)

logger = logging.getLogger(__name__)


def _open_local_file(path: str | Path, description: str = "File"):
    """Open a local file for reading, translating OS errors to LocalFileError."""
    file_path = Path(path)
    if not file_path.is_file():
        raise LocalFileError(f"{description} does not exist at given location: {file_path}", path=str(file_path))
    try:
        return open(file_path, 'rb')
    except OSError as e:
        raise LocalFileError(f"The local file could not be opened: {e}", path=str(file_path)) from e


class StreamClient:
    """Client for one Bunny Stream video library.

    Every public method issues exactly one HTTP request (``upload_video``
    issues two) and returns the decoded JSON body untouched. Failures are
    raised as subclasses of :class:`~bunnystream.core.errors.StreamError`.

    Example:
        >>> config = StreamConfig(api_key="secret", library_id="12345")
        >>> with StreamClient(config) as client:
        ...     videos = client.list_videos(search="cats")
    """

    def __init__(self, config: StreamConfig, transport: httpx.BaseTransport | None = None):
        """Initialize API client with configuration.

        Args:
            config: Library id, access key and transport settings.
            transport: Optional httpx transport, mainly for tests.
        """
        self.config = config
        self.base_url = config.library_url

        self.client = httpx.Client(
            base_url=self.base_url,
            follow_redirects=False,
            timeout=httpx.Timeout(config.timeout),
            headers={
                "AccessKey": config.api_key.get_secret_value(),
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            },
            transport=transport,
        )

    @classmethod
    def from_credentials(cls, api_key: str, library_id: str, **overrides: Any) -> "StreamClient":
        """Build a client straight from an access key and library id."""
        return cls(StreamConfig(api_key=api_key, library_id=library_id, **overrides))

    def __enter__(self) -> "StreamClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, options: RequestOptions | None = None) -> Any:
        """Send one request and classify the response.

        Returns:
            The decoded JSON body of a 2xx response, or None for an empty body.

        Raises:
            TransportError: The request never got a response.
            AuthenticationError: HTTP 401.
            VideoNotFoundError, CollectionNotFoundError, NotFoundError: HTTP 404.
            BadRequestError: HTTP 400.
            RequestError: Any other non-2xx status, or a 2xx body that is not JSON.
        """
        options = options or RequestOptions()
        params = {
            key: bool_param(value) if isinstance(value, bool) else value
            for key, value in drop_none(options.params).items()
        }

        logger.debug(f"{method} {path} params={params}")
        try:
            response = self.client.request(
                method=method,
                url=path,
                params=params,
                json=options.json,
                content=options.content,
                headers=options.headers,
            )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed before a response was received: {e}")
            raise TransportError(f"Request error: {e}") from e

        status = response.status_code

        if 200 <= status < 300:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise RequestError(
                    f"Invalid JSON response (HTTP {status}): {e}", status_code=status, body=response.text
                ) from e

        logger.warning(f"{method} {path} returned HTTP {status}")

        if status == 401:
            raise AuthenticationError(self.config.masked_api_key)

        if status == 404:
            if options.not_found_ref and "collections" in path:
                raise CollectionNotFoundError(options.not_found_ref)
            if options.not_found_ref:
                raise VideoNotFoundError(options.not_found_ref)
            raise NotFoundError()

        if status == 400:
            data = self._json_or_none(response)
            data = data if isinstance(data, dict) else {}
            message = str(data.get("message") or "Bad Request")
            details = data.get("data")
            error_list = details.get("errorList") if isinstance(details, dict) else None
            if isinstance(error_list, list) and error_list:
                message += " - " + ", ".join(str(entry) for entry in error_list)
            else:
                error_list = []
            raise BadRequestError(message, errors=error_list, body=response.text)

        raise RequestError(
            f"{options.failure_message} (HTTP {status}). Response: {response.text}",
            status_code=status,
            body=response.text,
        )

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def list_videos(
        self,
        search: str | None = None,
        page: int = 1,
        items_per_page: int = 100,
        collection: str | None = None,
        order_by: str | None = None,
    ) -> dict:
        """List or search videos in the library."""
        params = {
            "page": page,
            "itemsPerPage": items_per_page,
            "search": search,
            "collection": collection,
            "orderBy": order_by,
        }
        return self._request("GET", "videos", RequestOptions(
            params=params,
            failure_message="Could not list videos.",
        ))

    def get_video(self, video_id: str) -> dict:
        """Get a single video."""
        return self._request("GET", f"videos/{video_id}", RequestOptions(
            failure_message="Could not get video.",
            not_found_ref=video_id,
        ))

    def update_video(self, video_id: str, body: dict) -> dict:
        """Update video fields; ``body`` is sent as-is."""
        return self._request("POST", f"videos/{video_id}", RequestOptions(
            json=body,
            failure_message="Could not update video.",
            not_found_ref=video_id,
        ))

    def delete_video(self, video_id: str) -> dict:
        """Delete a video."""
        return self._request("DELETE", f"videos/{video_id}", RequestOptions(
            failure_message="Could not delete video.",
            not_found_ref=video_id,
        ))

    def create_video(
        self,
        title: str,
        collection_id: str | None = None,
        thumbnail_time: int | None = None,
    ) -> dict:
        """Create an empty video record, to be filled by an upload."""
        body = drop_none({
            "title": title,
            "collectionId": collection_id,
            "thumbnailTime": thumbnail_time,
        })
        return self._request("POST", "videos", RequestOptions(
            json=body,
            failure_message="Could not create video.",
        ))

    def upload_video_with_video_id(
        self,
        video_id: str,
        path: str | Path,
        enabled_resolutions: str | None = None,
    ) -> dict:
        """Upload a local file as the content of an existing video record.

        Raises:
            LocalFileError: The file is missing or unreadable; nothing is sent.
        """
        with _open_local_file(path) as handle:
            size = Path(path).stat().st_size
            logger.info(f"Uploading {path} ({size} bytes) to video {video_id}")
            try:
                return self._request("PUT", f"videos/{video_id}", RequestOptions(
                    params={"enabledResolutions": enabled_resolutions},
                    content=handle,
                    headers={"Content-Type": "application/octet-stream"},
                    failure_message="Could not upload video.",
                    not_found_ref=video_id,
                ))
            except OSError as e:
                raise LocalFileError(f"Could not read {path} during upload: {e}", path=str(path)) from e

    def upload_video(
        self,
        title: str,
        path: str | Path,
        collection_id: str | None = None,
        thumbnail_time: int | None = None,
        enabled_resolutions: str | None = None,
        cleanup_on_failure: bool = False,
    ) -> dict:
        """Create a video record and upload a local file into it.

        The two requests are not atomic. If the upload fails the created
        record stays in the library unless ``cleanup_on_failure`` is set, in
        which case it is deleted before the original error is re-raised.
        """
        # Fail on a bad path before creating anything remotely.
        _open_local_file(path).close()

        video = self.create_video(title, collection_id, thumbnail_time)
        video_id = video.get("guid") if isinstance(video, dict) else None
        if not video_id:
            raise RequestError(
                "Could not create video. Response carried no guid.",
                body=None if video is None else str(video),
            )
        try:
            return self.upload_video_with_video_id(video_id, path, enabled_resolutions)
        except StreamError:
            if cleanup_on_failure:
                logger.info(f"Upload failed, deleting created video {video_id}")
                try:
                    self.delete_video(video_id)
                except StreamError as cleanup_error:
                    logger.error(f"Could not delete video {video_id} after failed upload: {cleanup_error}")
            else:
                logger.warning(f"Upload failed, video record {video_id} left without content")
            raise

    def set_video_thumbnail(self, video_id: str, url: str) -> dict:
        """Set the thumbnail of a video from a URL."""
        return self._request("POST", f"videos/{video_id}/thumbnail", RequestOptions(
            params={"thumbnailUrl": url},
            failure_message="Could not set video thumbnail.",
            not_found_ref=video_id,
        ))

    def get_video_heatmap(self, video_id: str) -> dict:
        return self._request("GET", f"videos/{video_id}/heatmap", RequestOptions(
            failure_message="Could not get video heatmap.",
            not_found_ref=video_id,
        ))

    def get_video_play_data(
        self,
        video_id: str,
        token: str | None = None,
        expires: int | None = None,
    ) -> dict:
        return self._request("GET", f"videos/{video_id}/play", RequestOptions(
            params={"token": token, "expires": expires},
            failure_message="Could not get video play data.",
            not_found_ref=video_id,
        ))

    def get_video_statistics(self, video_id: str | None = None, query: dict | None = None) -> dict:
        """Get library statistics.

        A ``video_id`` replaces any other filter in ``query``.
        """
        params = dict(query or {})
        if video_id:
            params = {"videoId": video_id}
        return self._request("GET", "statistics", RequestOptions(params=params))

    def reencode_video(self, video_id: str) -> dict:
        return self._request("POST", f"videos/{video_id}/reencode", RequestOptions(
            failure_message="Could not reencode video.",
            not_found_ref=video_id,
        ))

    def add_output_codec(self, video_id: str, codec_id: int | OutputCodec) -> dict:
        """Request an additional encoded output of a video.

        Raises:
            ValidationError: ``codec_id`` is not one of 0 (x264), 1 (vp9),
                2 (hevc) or 3 (av1).
        """
        codec = self._validate_codec(codec_id)
        return self._request("PUT", f"videos/{video_id}/outputs/{codec.value}", RequestOptions(
            failure_message="Could not add output codec.",
        ))

    @staticmethod
    def _validate_codec(codec_id: int | OutputCodec) -> OutputCodec:
        if isinstance(codec_id, OutputCodec):
            return codec_id
        if not isinstance(codec_id, bool) and isinstance(codec_id, int):
            try:
                return OutputCodec(codec_id)
            except ValueError:
                pass
        raise ValidationError(
            "Invalid codec value. 0 = x264, 1 = vp9, 2 = hevc, 3 = av1.", field="codec_id"
        )

    def repackage_video(self, video_id: str, keep_original_files: bool = True) -> dict:
        return self._request("GET", f"videos/{video_id}/repackage", RequestOptions(
            params={"keepOriginalFiles": keep_original_files},
            failure_message="Could not repackage video.",
            not_found_ref=video_id,
        ))

    def fetch_video(
        self,
        url: str,
        title: str | None = None,
        collection_id: str | None = None,
        thumbnail_time: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict:
        """Ask the API to fetch a video from a remote URL."""
        body = drop_none({"url": url, "title": title, "headers": headers})
        return self._request("POST", "videos/fetch", RequestOptions(
            params={"collectionId": collection_id, "thumbnailTime": thumbnail_time},
            json=body,
            failure_message="Could not fetch video.",
        ))

    # ------------------------------------------------------------------
    # Captions and transcription
    # ------------------------------------------------------------------

    def add_caption(
        self,
        video_id: str,
        srclang: str,
        path: str | Path,
        label: str | None = None,
    ) -> dict:
        """Upload a captions file (sent base64-encoded) for one language.

        Raises:
            LocalFileError: The captions file is missing or unreadable.
        """
        with _open_local_file(path, "Captions file") as handle:
            try:
                encoded = base64.b64encode(handle.read()).decode("ascii")
            except OSError as e:
                raise LocalFileError(f"Could not read captions file: {e}", path=str(path)) from e

        body = drop_none({"srclang": srclang, "captionsFile": encoded, "label": label})
        return self._request("POST", f"videos/{video_id}/captions/{srclang}", RequestOptions(
            json=body,
            failure_message="Could not add caption.",
            not_found_ref=video_id,
        ))

    def delete_caption(self, video_id: str, srclang: str) -> dict:
        return self._request("DELETE", f"videos/{video_id}/captions/{srclang}", RequestOptions(
            failure_message="Could not delete caption.",
            not_found_ref=video_id,
        ))

    def transcribe_video(
        self,
        video_id: str,
        language: str,
        force: bool = False,
        options: TranscriptionOptions | dict | None = None,
    ) -> dict:
        """Start automatic transcription of a video.

        ``options`` may be a :class:`TranscriptionOptions` or a mapping using
        the API's field names; unset fields are left out of the body.
        """
        if isinstance(options, TranscriptionOptions):
            body = options.to_body()
        else:
            options = options or {}
            body = drop_none({
                "targetLanguages": options.get("targetLanguages"),
                "generateTitles": options.get("generateTitles"),
                "generateDescription": options.get("generateDescription"),
                "sourceLanguage": options.get("sourceLanguage"),
            })

        return self._request("POST", f"videos/{video_id}/transcribe", RequestOptions(
            params={"language": language, "force": force},
            json=body,
            failure_message="Could not transcribe video.",
            not_found_ref=video_id,
        ))

    # ------------------------------------------------------------------
    # Resolutions
    # ------------------------------------------------------------------

    def get_video_resolutions(self, video_id: str) -> dict:
        return self._request("GET", f"videos/{video_id}/resolutions", RequestOptions(
            failure_message="Could not list video resolutions.",
            not_found_ref=video_id,
        ))

    def cleanup_resolutions(
        self,
        video_id: str,
        resolutions: str,
        options: CleanupOptions | None = None,
    ) -> dict:
        """Delete encoded resolutions of a video (``dry_run`` to preview)."""
        params = {"resolutionsToDelete": resolutions}
        params.update((options or CleanupOptions()).to_params())
        return self._request("POST", f"videos/{video_id}/resolutions/cleanup", RequestOptions(
            params=params,
            failure_message="Could not cleanup video resolutions.",
            not_found_ref=video_id,
        ))

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def list_collections(
        self,
        search: str | None = None,
        page: int = 1,
        items_per_page: int = 100,
        order_by: str = "date",
        include_thumbnails: bool = False,
    ) -> dict:
        params = {
            "page": page,
            "itemsPerPage": items_per_page,
            "includeThumbnails": include_thumbnails,
            "orderBy": order_by,
            "search": search,
        }
        return self._request("GET", "collections", RequestOptions(
            params=params,
            failure_message="Could not list collections.",
        ))

    def get_collection(self, collection_id: str, include_thumbnails: bool = False) -> dict:
        return self._request("GET", f"collections/{collection_id}", RequestOptions(
            params={"includeThumbnails": include_thumbnails},
            failure_message="Could not get collection.",
            not_found_ref=collection_id,
        ))

    def create_collection(self, name: str) -> dict:
        return self._request("POST", "collections", RequestOptions(
            json={"name": name},
            failure_message="Could not create collection.",
        ))

    def update_collection(self, collection_id: str, name: str) -> dict:
        return self._request("POST", f"collections/{collection_id}", RequestOptions(
            json={"name": name},
            failure_message="Could not update collection.",
            not_found_ref=collection_id,
        ))

    def delete_collection(self, collection_id: str) -> dict:
        return self._request("DELETE", f"collections/{collection_id}", RequestOptions(
            failure_message="Could not delete collection.",
            not_found_ref=collection_id,
        ))
