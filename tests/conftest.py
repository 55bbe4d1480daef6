"""Pytest configuration and fixtures."""

import shutil
import tempfile
from pathlib import Path

import httpx
import pytest

from bunnystream.api.stream_client import StreamClient
from bunnystream.config.settings import StreamConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return StreamConfig(api_key="test-access-key", library_id="12345")


@pytest.fixture
def recorded_requests():
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def client_for(test_config, recorded_requests):
    """Build a client whose transport answers with the given responses in order.

    Each item is either an ``httpx.Response`` or an exception to raise.
    """
    clients = []

    def _factory(*responses):
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            item = queue.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        client = StreamClient(test_config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _factory

    for client in clients:
        client.close()


@pytest.fixture
def sample_video():
    """A video object as returned by the API."""
    return {
        "videoLibraryId": 12345,
        "guid": "abc123",
        "title": "Holiday",
        "length": 0,
        "status": 0,
        "collectionId": "",
        "captions": [],
    }


@pytest.fixture
def sample_video_file(temp_dir):
    """Create a small local video file."""
    file_path = temp_dir / "holiday.mp4"
    file_path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64)
    return file_path


@pytest.fixture
def sample_captions_file(temp_dir):
    """Create a WebVTT captions file."""
    file_path = temp_dir / "captions.vtt"
    file_path.write_text("WEBVTT\n\n00:00.000 --> 00:01.000\nHello\n", encoding="utf-8")
    return file_path
