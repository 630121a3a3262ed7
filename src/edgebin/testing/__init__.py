"""Test utilities for edgebin applications.

    from edgebin.testing import TestClient
"""

from edgebin.testing.client import TestClient, TestResponse, WebSocketSession, encode_multipart

__all__ = ["TestClient", "TestResponse", "WebSocketSession", "encode_multipart"]
