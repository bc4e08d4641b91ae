"""Tests for the limpet command line."""

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from limpet.cli import JsonFormatter, app


FIXTURES_DIR = Path(__file__).parent / "fixtures"

runner = CliRunner()


def _run(*args):
    return runner.invoke(app, [str(a) for a in args])


class TestValidate:
    """Tests for the validate command."""

    def test_valid_manifest(self):
        """Test that a good manifest passes."""
        result = _run("validate", FIXTURES_DIR / "manifest_v3.json")

        assert result.exit_code == 0
        assert "Validation passed" in result.stdout

    def test_invalid_manifest(self, tmp_path):
        """Test that a failing manifest exits with code 2."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"@context": "http://iiif.io/api/presentation/2/context.json"}))

        result = _run("validate", path)

        assert result.exit_code == 2
        assert "Validation failed" in result.stdout

    def test_missing_file(self, tmp_path):
        """Test that an unreadable source exits with code 1."""
        result = _run("validate", tmp_path / "nope.json")
        assert result.exit_code == 1


class TestInspect:
    """Tests for the inspect command."""

    def test_manifest(self):
        """Test the manifest summary."""
        result = _run("inspect", FIXTURES_DIR / "manifest_v2.json")

        assert result.exit_code == 0
        assert "Version: 2" in result.stdout
        assert "Kind: Manifest" in result.stdout
        assert "Label: Book 1" in result.stdout
        assert "Canvases: 3" in result.stdout
        assert "Ranges: 1" in result.stdout

    def test_collection_with_language(self):
        """Test the collection summary."""
        result = _run("inspect", FIXTURES_DIR / "collection_v3.json", "--lang", "de")

        assert result.exit_code == 0
        assert "Kind: Collection" in result.stdout
        assert "Label: Top Collection" in result.stdout
        assert "Manifests: 1" in result.stdout
        assert "Collections: 1" in result.stdout

    def test_depth_limit(self):
        """Test that the nesting cap is applied."""
        result = _run("inspect", FIXTURES_DIR / "collection_v3.json", "--max-depth", "1")
        assert result.exit_code == 2


class TestParseUri:
    """Tests for the parse-uri command."""

    def test_request(self):
        """Test a full image request address."""
        result = _run("parse-uri", "https://example.org/iiif/abc/0,0,100,200/pct:50/!90/gray.png")

        assert result.exit_code == 0
        assert "Identifier: iiif/abc" in result.stdout
        assert "Region: 0,0,100,200" in result.stdout
        assert "Size: pct:50" in result.stdout
        assert "Rotation: !90" in result.stdout
        assert "Quality: gray" in result.stdout
        assert "Format: png" in result.stdout

    def test_info(self):
        """Test a service address."""
        result = _run("parse-uri", "https://example.org/iiif/abc/info.json")

        assert result.exit_code == 0
        assert "Canonical: https://example.org/iiif/abc/info.json" in result.stdout
        assert "Region:" not in result.stdout

    def test_relative(self):
        """Test that a relative address is rejected."""
        assert _run("parse-uri", "iiif/abc/info.json").exit_code == 2


class TestThumbnailAndTiles:
    """Tests for the thumbnail and tiles commands."""

    def test_thumbnail(self):
        """Test the thumbnail URL."""
        result = _run("thumbnail", "https://example.org/iiif/2/abc/info.json")

        assert result.exit_code == 0
        assert result.stdout.strip() == "https://example.org/iiif/2/abc/full/180,/0/default.jpg"

    def test_tiles_single(self):
        """Test that a fully downscaled image is a single request."""
        result = _run("tiles", FIXTURES_DIR / "info_v2.json", "--scale", "64")

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "https://example.org/iiif/2/abc/full/104,134/0/default.jpg"
        ]

    def test_tiles_grid(self):
        """Test one line per tile."""
        result = _run("tiles", FIXTURES_DIR / "info_v3.json")

        assert result.exit_code == 0
        assert len(result.stdout.splitlines()) == 12

    def test_tiles_rejects_zero_scale(self):
        """Test the scale lower bound."""
        assert _run("tiles", FIXTURES_DIR / "info_v3.json", "--scale", "0").exit_code == 2


class TestJsonFormatter:
    """Tests for the structured log formatter."""

    def test_extra_fields(self):
        """Test that extra attributes are included."""
        record = logging.LogRecord("limpet", logging.INFO, __file__, 1, "Decoded %s", ("x",), None)
        record.version = "3"

        payload = json.loads(JsonFormatter().format(record))

        assert payload["msg"] == "Decoded x"
        assert payload["level"] == "INFO"
        assert payload["version"] == "3"
