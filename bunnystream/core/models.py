"""Request descriptors and option types for API calls."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def bool_param(value: bool) -> str:
    """Serialize a boolean the way the API expects it in query strings."""
    return "true" if value else "false"


def drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Remove unset entries so they never reach the wire."""
    return {key: value for key, value in values.items() if value is not None}


class OutputCodec(Enum):
    """Codecs that can be requested as additional outputs."""

    X264 = 0
    VP9 = 1
    HEVC = 2
    AV1 = 3


@dataclass
class RequestOptions:
    """Everything dispatch needs beyond the method and path."""

    params: dict[str, Any] = field(default_factory=dict)
    json: Any = None
    content: Any = None
    headers: dict[str, str] | None = None
    failure_message: str = "Request failed."
    not_found_ref: str | None = None


@dataclass
class TranscriptionOptions:
    """Optional body fields for a transcription request."""

    target_languages: list[str] | None = None
    generate_titles: bool | None = None
    generate_description: bool | None = None
    source_language: str | None = None

    def to_body(self) -> dict[str, Any]:
        return drop_none({
            "targetLanguages": self.target_languages,
            "generateTitles": self.generate_titles,
            "generateDescription": self.generate_description,
            "sourceLanguage": self.source_language,
        })


@dataclass
class CleanupOptions:
    """Flags for deleting encoded resolutions of a video."""

    delete_non_configured_resolutions: bool = False
    delete_original: bool = False
    delete_mp4_files: bool = False
    dry_run: bool = False

    def to_params(self) -> dict[str, str]:
        return {
            "deleteNonConfiguredResolutions": bool_param(self.delete_non_configured_resolutions),
            "deleteOriginal": bool_param(self.delete_original),
            "deleteMp4Files": bool_param(self.delete_mp4_files),
            "dryRun": bool_param(self.dry_run),
        }
