"""Pytest configuration for unit tests.

This module blocks network access for every test under tests/unit/ by
patching requests and socket connections. Tests mock the HTTP session
instead (see ``downloader._get_thread_request_session``).

pytest registers this file as the ``conftest`` module for the unit tests,
replacing the parent one, so the shared helpers from tests/conftest.py are
re-exported here for ``from conftest import ...``.
"""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest
import requests

HTTP_METHODS = ("get", "post", "put", "delete", "head", "options", "patch")


def _load_shared_helpers():
    shared_path = Path(__file__).resolve().parent.parent / "conftest.py"
    spec = importlib.util.spec_from_file_location("quran_podcast_test_helpers", shared_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


_shared = _load_shared_helpers()

TEST_BASE_URL = _shared.TEST_BASE_URL
TEST_FEED_URL = _shared.TEST_FEED_URL
TEST_CHANNEL_IMAGE = _shared.TEST_CHANNEL_IMAGE
TEST_ITEM_IMAGE = _shared.TEST_ITEM_IMAGE
TEST_MEDIA_URL = _shared.TEST_MEDIA_URL
TEST_RECITER = _shared.TEST_RECITER
TEST_OTHER_RECITER = _shared.TEST_OTHER_RECITER
TEST_ARABIC_TITLE = _shared.TEST_ARABIC_TITLE
TEST_ENGLISH_TITLE = _shared.TEST_ENGLISH_TITLE
build_item_xml = _shared.build_item_xml
build_rss_xml = _shared.build_rss_xml
create_test_config = _shared.create_test_config
create_test_episode = _shared.create_test_episode
MockHTTPResponse = _shared.MockHTTPResponse
create_rss_response = _shared.create_rss_response


class NetworkCallDetectedError(Exception):
    """Raised when a unit test attempts to make a network call."""

    def __init__(self, library_name: str, call_type: str):
        self.library_name = library_name
        self.call_type = call_type
        super().__init__(
            f"Network call detected in unit test: {library_name}.{call_type}()\n"
            f"Unit tests must not make network calls. Use mocks instead.\n"
            f"If this test needs network access, it should be moved to integration/."
        )


def _create_network_blocker(library_name: str, call_type: str):
    """Create a function that blocks network calls and raises an error."""

    def blocker(*args, **kwargs):
        raise NetworkCallDetectedError(library_name, call_type)

    return blocker


@pytest.fixture(autouse=True)
def block_network_io():
    """Automatically block real HTTP and socket connections in unit tests."""
    patchers = [
        patch.object(requests, method, side_effect=_create_network_blocker("requests", method))
        for method in HTTP_METHODS
    ]

    original_session_init = requests.Session.__init__

    def patched_session_init(self, *args, **kwargs):
        original_session_init(self, *args, **kwargs)
        for method in HTTP_METHODS:
            setattr(self, method, _create_network_blocker("requests.Session", method))

    patchers.append(patch.object(requests.Session, "__init__", patched_session_init))
    patchers.append(
        patch(
            "socket.create_connection",
            side_effect=_create_network_blocker("socket", "create_connection"),
        )
    )

    for patcher in patchers:
        patcher.start()
    try:
        yield
    finally:
        for patcher in reversed(patchers):
            patcher.stop()
