"""Tests for request building and sending."""

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from limpet.iiif import (
    DEFAULT_ACCEPT,
    IMAGE_ACCEPT,
    FieldDecodeError,
    Manifest,
    UnknownVersionError,
    Version,
    load_info,
    load_manifest,
    load_resource,
    request_info,
    request_manifest,
    request_resource,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"
MANIFEST_URL = "https://example.org/iiif/book1/manifest"


def _client(routes, seen=None):
    """httpx client answering from ``routes`` (url -> Response)."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return routes.get(str(request.url), httpx.Response(404))

    return httpx.Client(transport=httpx.MockTransport(handler))


def _fixture_response(name):
    return httpx.Response(200, json=json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8")))


class TestPendingRequest:
    """Tests for request_* builders and PendingRequest.send()."""

    def test_accept_headers_in_order(self):
        """Test that one Accept header is sent per entry."""
        seen = []
        client = _client({MANIFEST_URL: _fixture_response("manifest_v3.json")}, seen)

        request_manifest(lambda outcome: outcome, DEFAULT_ACCEPT, MANIFEST_URL).send(client)

        assert seen[0].headers.get_list("Accept") == list(DEFAULT_ACCEPT)

    def test_decoded_outcome(self):
        """Test that the handler receives the version and manifest."""
        client = _client({MANIFEST_URL: _fixture_response("manifest_v2.json")})

        outcome = request_manifest(lambda o: o, DEFAULT_ACCEPT, MANIFEST_URL).send(client)

        version, manifest = outcome
        assert version is Version.V2
        assert isinstance(manifest, Manifest)

    def test_handler_return_value(self):
        """Test that send() returns whatever the handler returns."""
        client = _client({MANIFEST_URL: _fixture_response("manifest_v3.json")})

        def handler(outcome):
            _, manifest = outcome
            return len(manifest.canvases)

        assert request_resource(handler, DEFAULT_ACCEPT, MANIFEST_URL).send(client) == 3

    def test_http_error_goes_to_handler(self):
        """Test that a 404 is handed over as an httpx error."""
        client = _client({})

        outcome = request_manifest(lambda o: o, DEFAULT_ACCEPT, MANIFEST_URL).send(client)

        assert isinstance(outcome, httpx.HTTPStatusError)
        assert outcome.response.status_code == 404

    def test_decode_error_goes_to_handler(self):
        """Test that decode failures are outcomes, not exceptions."""
        client = _client({MANIFEST_URL: httpx.Response(200, json={"label": "no context"})})

        outcome = request_manifest(lambda o: o, DEFAULT_ACCEPT, MANIFEST_URL).send(client)

        assert isinstance(outcome, UnknownVersionError)

    def test_invalid_json_goes_to_handler(self):
        """Test that a body that is not JSON is handed over."""
        client = _client({MANIFEST_URL: httpx.Response(200, text="<html>")})

        outcome = request_manifest(lambda o: o, DEFAULT_ACCEPT, MANIFEST_URL).send(client)

        assert isinstance(outcome, ValueError)

    def test_info_request(self):
        """Test an info.json request with image Accept headers."""
        url = "https://example.org/iiif/2/abc/info.json"
        seen = []
        client = _client({url: _fixture_response("info_v2.json")}, seen)

        version, info = request_info(lambda o: o, IMAGE_ACCEPT, url).send(client)

        assert version is Version.V2
        assert info.width == 6676
        assert seen[0].headers.get_list("Accept")[0].startswith("application/ld+json")

    def test_send_async(self):
        """Test the asynchronous variant."""

        def handler(request):
            return _fixture_response("manifest_v3.json")

        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                pending = request_manifest(lambda o: o, DEFAULT_ACCEPT, MANIFEST_URL)
                return await pending.send_async(client)

        version, manifest = asyncio.run(run())
        assert version is Version.V3
        assert manifest.id == MANIFEST_URL


class TestLoadFromFile:
    """Tests for the file-or-URL loaders with local paths."""

    def test_load_manifest(self):
        """Test loading a manifest from disk."""
        version, manifest = load_manifest(str(FIXTURES_DIR / "manifest_v3.json"))
        assert version is Version.V3
        assert manifest.id == MANIFEST_URL

    def test_load_resource(self):
        """Test loading a collection from disk."""
        version, collection = load_resource(str(FIXTURES_DIR / "collection_v2.json"))
        assert version is Version.V2
        assert len(collection.items) == 2

    def test_load_info(self):
        """Test loading an info.json from disk."""
        version, info = load_info(str(FIXTURES_DIR / "info_v3.json"))
        assert version is Version.V3
        assert info.height == 800

    def test_load_manifest_raises(self, tmp_path):
        """Test that decode errors propagate from the loaders."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"@context": "http://iiif.io/api/presentation/3/context.json"}))
        with pytest.raises(FieldDecodeError):
            load_manifest(str(path))

    def test_missing_file(self):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_manifest(str(FIXTURES_DIR / "does_not_exist.json"))
