import os
import tempfile

# Keep log files out of the working tree; must happen before speechkit is imported
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "speechkit-test-logs"))

import httpx
import pytest

from speechkit.core.config import ClientConfig
from speechkit.core.elevenlabs_client import ElevenLabsClient

API_KEY = "test-key-0123456789"


class ChunkedStream(httpx.SyncByteStream):
    """Response body delivered in several chunks, optionally failing part way"""

    def __init__(self, chunks, fail_after=None):
        self.chunks = chunks
        self.fail_after = fail_after

    def __iter__(self):
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise httpx.ReadError("connection reset by peer")
            yield chunk


@pytest.fixture
def config():
    return ClientConfig(api_key=API_KEY, base_url="https://api.test/v1", timeout=5)


@pytest.fixture
def make_client(config):
    clients = []

    def _make(handler):
        client = ElevenLabsClient(config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
