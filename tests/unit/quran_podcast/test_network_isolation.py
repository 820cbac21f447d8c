#!/usr/bin/env python3
"""Test that network isolation is enforced in unit tests."""

import socket
import unittest

import pytest
import requests

pytestmark = [pytest.mark.unit]


class TestNetworkIsolation(unittest.TestCase):
    """Test that network calls are blocked in unit tests."""

    def test_requests_get_blocked(self):
        with self.assertRaises(Exception) as context:
            requests.get(
                "https://example.com", timeout=1
            )  # nosec B113 - intentional: testing network blocking
        self.assertIn("Network call detected", str(context.exception))
        self.assertIn("requests", str(context.exception))

    def test_requests_session_blocked(self):
        session = requests.Session()
        try:
            with self.assertRaises(Exception) as context:
                session.get("https://example.com", timeout=1)
            self.assertIn("requests.Session", str(context.exception))
        finally:
            session.close()

    def test_socket_connection_blocked(self):
        with self.assertRaises(Exception) as context:
            socket.create_connection(("example.com", 443), timeout=1)
        self.assertIn("socket", str(context.exception))


if __name__ == "__main__":
    unittest.main()
