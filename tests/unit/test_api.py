"""Unit tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from slashfill.core.config import Settings
from slashfill.core.factory import ComponentFactory
from slashfill.engine.context import LOADING_GLYPH
from slashfill.interfaces.transport import TransportError
from slashfill.main import create_app
from tests.fakes import FakeConnectivity, FakeTransport, completion


class StubFactory(ComponentFactory):
    """Factory handing out fake backend components."""

    def __init__(self, settings: Settings, transport: FakeTransport, connectivity: FakeConnectivity):
        super().__init__(settings)
        self.transport = transport
        self.connectivity = connectivity
        self._transport_cache = transport
        self._connectivity_cache = connectivity


@pytest.fixture
def settings():
    return Settings(_env_file=None, openrouter_api_key="", tick_ms=0, erase_tick_ms=0, web_search=False)


@pytest.fixture
def make_client(settings):
    """Build a TestClient around a StubFactory answering with ``responses``."""

    def build(*responses, connected: bool = True):
        transport = FakeTransport(*responses)
        factory = StubFactory(settings, transport, FakeConnectivity(connected=connected))
        return TestClient(create_app(settings, factory=factory)), transport

    return build


# =============================================================================
# Health Tests
# =============================================================================


class TestHealth:
    """Test suite for the health endpoint."""

    def test_health(self, make_client):
        """Test the health payload."""
        client, _ = make_client()

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "slashfill-api"
        assert body["connectivity"] == "connected"

    def test_lifespan_validates_and_closes(self, make_client):
        """Test the startup check and shutdown cleanup."""
        client, transport = make_client()
        connectivity = client.app.state.factory.connectivity

        with client:
            assert connectivity.validations == 1

        assert transport.closed is True

    def test_unconfigured_backend(self, settings):
        """Test health without a usable transport configuration."""
        proxy_settings = settings.model_copy(update={"transport_type": "proxy"})
        client = TestClient(create_app(proxy_settings, factory=ComponentFactory(proxy_settings)))

        assert client.get("/health").json()["connectivity"] == "unconfigured"


# =============================================================================
# Fill Tests
# =============================================================================


class TestFillEndpoint:
    """Test suite for POST /fill."""

    def test_batch_fill(self, make_client):
        """Test a batch trigger end to end."""
        client, transport = make_client(completion('["Paris", "Lyon"]', completion_tokens=5))

        response = client.post("/fill", json={"text": "Born in / and raised in /.//"})

        assert response.status_code == 200
        body = response.json()
        assert body["text"] == "Born in Paris and raised in Lyon."
        assert body["mode"] == "batch"
        assert body["status"] == "done"
        assert [insertion["answer"] for insertion in body["insertions"]] == ["Paris", "Lyon"]
        assert body["tokens_used"] == 5.0
        assert transport.calls == 1

    def test_inline_fill(self, make_client):
        """Test an inline trigger end to end."""
        client, _ = make_client(completion("Paris"))

        body = client.post("/fill", json={"text": "The capital of France is // and"}).json()

        assert body["text"] == "The capital of France is Paris and"
        assert body["mode"] == "inline"

    def test_blanks_only(self, make_client):
        """Test filling blanks without a trigger."""
        client, _ = make_client(completion('["Paris"]'))

        body = client.post(
            "/fill", json={"text": "The capital of France is /.", "blanks_only": True}
        ).json()

        assert body["text"] == "The capital of France is Paris."

    def test_missing_trigger(self, make_client):
        """Test that text without a trigger is rejected."""
        client, transport = make_client()

        response = client.post("/fill", json={"text": "Born in / and"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Text contains no // trigger"
        assert transport.calls == 0

    def test_invalid_body(self, make_client):
        """Test request validation."""
        client, _ = make_client()

        response = client.post("/fill", json={"text": "x //", "trigger_index": -1})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    def test_trigger_index_not_at_trigger(self, make_client):
        """Test that trigger_index must point at a // pair."""
        client, transport = make_client(completion("Paris"))

        response = client.post("/fill", json={"text": "Born in // Lyon", "trigger_index": 3})

        assert response.status_code == 422
        assert response.json()["detail"] == "trigger_index does not point at a // trigger"
        assert transport.calls == 0

    def test_explicit_trigger_index(self, make_client):
        """Test a fill at a caller-supplied trigger offset."""
        client, _ = make_client(completion("Paris"))

        body = client.post(
            "/fill", json={"text": "The capital of France is //", "trigger_index": 25}
        ).json()

        assert body["status"] == "done"
        assert body["text"] == "The capital of France is Paris"

    def test_not_connected(self, make_client):
        """Test the not-connected notice."""
        client, transport = make_client(connected=False)

        body = client.post("/fill", json={"text": "Born in /.//"}).json()

        assert body["status"] == "failed"
        assert body["notice"] == "LLM API Not Connected"
        assert body["text"] == "Born in /.//"
        assert transport.calls == 0

    def test_transport_failure(self, make_client):
        """Test that a failed request returns the text without glyphs."""
        client, _ = make_client(TransportError("down"))

        body = client.post("/fill", json={"text": "Born in /.//"}).json()

        assert body["status"] == "failed"
        assert LOADING_GLYPH not in body["text"]


class TestFillStream:
    """Test suite for POST /fill/stream."""

    def test_stream_frames_then_result(self, make_client):
        """Test the NDJSON event sequence."""
        client, _ = make_client(completion('["Paris"]'))

        response = client.post("/fill/stream", json={"text": "The capital of France is /.//"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        events = [json.loads(line) for line in response.text.splitlines() if line]
        frames = [event["text"] for event in events if event["type"] == "frame"]

        assert events[-1]["type"] == "result"
        assert events[-1]["result"]["text"] == "The capital of France is Paris."
        assert LOADING_GLYPH in frames[0]
        assert frames[-1] == "The capital of France is Paris."

    def test_trigger_index_not_at_trigger(self, make_client):
        """Test that a bad trigger_index is rejected before streaming starts."""
        client, transport = make_client(completion("Paris"))

        response = client.post(
            "/fill/stream", json={"text": "Born in // Lyon", "trigger_index": 40}
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "trigger_index does not point at a // trigger"
        assert transport.calls == 0


# =============================================================================
# Title Tests
# =============================================================================


class TestTitleEndpoint:
    """Test suite for POST /title."""

    def test_new_title(self, make_client):
        """Test a generated title."""
        client, transport = make_client(completion('"Trip to Paris"'))

        response = client.post("/title", json={"text": "We went to Paris in May.", "title": "New Note"})

        assert response.status_code == 200
        assert response.json() == {"title": "Trip to Paris", "changed": True}
        assert transport.payloads[0]["max_tokens"] == 10

    def test_unchanged_title(self, make_client):
        """Test that the same title is reported as unchanged."""
        client, _ = make_client(completion("Trip to Paris"))

        body = client.post("/title", json={"text": "Paris.", "title": "Trip to Paris"}).json()

        assert body == {"title": "Trip to Paris", "changed": False}

    def test_not_connected(self, make_client):
        """Test the not-connected error."""
        client, _ = make_client(connected=False)

        response = client.post("/title", json={"text": "Paris."})

        assert response.status_code == 503
        assert response.json()["detail"] == "LLM API Not Connected"

    def test_transport_failure(self, make_client):
        """Test an upstream failure."""
        client, _ = make_client(TransportError("down"))

        assert client.post("/title", json={"text": "Paris."}).status_code == 502

    def test_malformed_response(self, make_client):
        """Test a body without content."""
        client, _ = make_client({"error": {"message": "rate limited"}})

        assert client.post("/title", json={"text": "Paris."}).status_code == 502
