"""Tests for version detection and decoder dispatch."""

from pathlib import Path

import pytest

from limpet.iiif import (
    PRESENTATION_2_CONTEXT,
    PRESENTATION_3_CONTEXT,
    Canvas,
    Collection,
    FieldDecodeError,
    Manifest,
    Range,
    UnknownResourceTypeError,
    UnknownVersionError,
    Version,
    decode_info,
    decode_manifest,
    decode_resource,
    load_json,
)
from limpet.iiif.image_uri import InfoUri
from limpet.iiif.models import TileSpec
from limpet.iiif.version import context_values, detect_version


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _fixture(name):
    return load_json(str(FIXTURES_DIR / name))


class TestDetectVersion:
    """Tests for detect_version()."""

    def test_string_context(self):
        """Test a single context string."""
        assert detect_version(
            PRESENTATION_2_CONTEXT, v3=PRESENTATION_3_CONTEXT, v2=PRESENTATION_2_CONTEXT
        ) is Version.V2

    def test_v3_wins_when_both_present(self):
        """Test that the newer context is checked first."""
        context = [PRESENTATION_2_CONTEXT, PRESENTATION_3_CONTEXT]
        assert detect_version(
            context, v3=PRESENTATION_3_CONTEXT, v2=PRESENTATION_2_CONTEXT
        ) is Version.V3

    def test_non_string_entries(self):
        """Test that non-string entries only pass in lenient mode."""
        assert context_values([None, "a"]) is None
        assert context_values([None, "a"], lenient=True) == ["a"]

    def test_no_match(self):
        """Test an unrelated context."""
        assert detect_version(
            "http://schema.org", v3=PRESENTATION_3_CONTEXT, v2=PRESENTATION_2_CONTEXT
        ) is None


class TestDecodeManifest:
    """Tests for dispatch.decode_manifest()."""

    def test_version_matches_context(self):
        """Test that each dialect is reported with its version."""
        version, manifest = decode_manifest(_fixture("manifest_v2.json"))
        assert version is Version.V2
        assert isinstance(manifest, Manifest)

        version, manifest = decode_manifest(_fixture("manifest_v3.json"))
        assert version is Version.V3
        assert len(manifest.canvases) == 3

    def test_unknown_context(self):
        """Test that a missing context is rejected."""
        data = _fixture("manifest_v2.json")
        del data["@context"]
        with pytest.raises(UnknownVersionError):
            decode_manifest(data)

    def test_null_in_presentation_context(self):
        """Test that presentation contexts are not read leniently."""
        data = _fixture("manifest_v3.json")
        data["@context"] = [None, PRESENTATION_3_CONTEXT]
        with pytest.raises(UnknownVersionError):
            decode_manifest(data)

    def test_no_fallback_to_other_dialect(self):
        """Test that a v3 failure is not retried as v2."""
        data = _fixture("manifest_v2.json")
        data["@context"] = PRESENTATION_3_CONTEXT
        with pytest.raises(FieldDecodeError):
            decode_manifest(data)

    def test_not_an_object(self):
        """Test that a JSON array is rejected."""
        with pytest.raises(FieldDecodeError):
            decode_manifest([])


class TestDecodeResource:
    """Tests for dispatch.decode_resource()."""

    @pytest.mark.parametrize(
        "name,kind,version",
        [
            ("manifest_v2.json", Manifest, Version.V2),
            ("manifest_v3.json", Manifest, Version.V3),
            ("collection_v2.json", Collection, Version.V2),
            ("collection_v3.json", Collection, Version.V3),
        ],
    )
    def test_fixtures(self, name, kind, version):
        """Test that each fixture decodes to its kind."""
        got_version, resource = decode_resource(_fixture(name))
        assert got_version is version
        assert isinstance(resource, kind)

    def test_canvas_and_range(self):
        """Test standalone canvases and ranges."""
        canvas = {
            "@context": PRESENTATION_3_CONTEXT,
            "id": "c1",
            "type": "Canvas",
            "width": 10,
            "height": 20,
        }
        _, resource = decode_resource(canvas)
        assert isinstance(resource, Canvas)
        assert resource.aspect_ratio == 2.0

        rng = {
            "@context": PRESENTATION_2_CONTEXT,
            "@id": "r1",
            "@type": "sc:Range",
            "label": "Chapter",
            "canvases": ["c1"],
        }
        _, resource = decode_resource(rng)
        assert isinstance(resource, Range)
        assert resource.canvas_ids() == ["c1"]

    def test_unknown_type(self):
        """Test that the type must belong to the detected dialect."""
        data = _fixture("manifest_v3.json")
        data["type"] = "sc:Manifest"
        with pytest.raises(UnknownResourceTypeError) as exc_info:
            decode_resource(data)
        assert exc_info.value.value == "sc:Manifest"


class TestDecodeInfo:
    """Tests for dispatch.decode_info()."""

    def test_v2(self):
        """Test an Image API 2 info.json."""
        version, info = decode_info(_fixture("info_v2.json"))

        assert version is Version.V2
        assert info.id == InfoUri("https://example.org", "iiif/2/abc")
        assert (info.width, info.height) == (6676, 8560)
        assert info.tiles == (TileSpec(256, None, (1, 2, 4, 8, 16, 32)),)
        assert len(info.sizes) == 2

    def test_v3_with_null_context_entry(self):
        """Test that nulls in an image context array are skipped."""
        version, info = decode_info(_fixture("info_v3.json"))

        assert version is Version.V3
        assert info.id == InfoUri("https://example.org", "iiif/3/abc")
        assert info.tiles[0].height == 256

    def test_only_nulls(self):
        """Test that a context of nulls has no version."""
        data = _fixture("info_v3.json")
        data["@context"] = [None, None]
        with pytest.raises(UnknownVersionError):
            decode_info(data)

    def test_presentation_context_is_not_an_image_context(self):
        """Test that info.json needs an Image API context."""
        data = _fixture("info_v3.json")
        data["@context"] = PRESENTATION_3_CONTEXT
        with pytest.raises(UnknownVersionError):
            decode_info(data)

    def test_missing_width(self):
        """Test that width is required."""
        data = _fixture("info_v3.json")
        del data["width"]
        with pytest.raises(FieldDecodeError) as exc_info:
            decode_info(data)
        assert exc_info.value.path == "width"
