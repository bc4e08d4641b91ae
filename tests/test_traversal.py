"""Tests for collection traversal helpers."""

from pathlib import Path

import pytest

from limpet.iiif import (
    UnknownResourceTypeError,
    Version,
    is_collection,
    is_manifest,
    iter_manifests,
    load_json,
)
from limpet.iiif import traversal


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _manifest_doc(manifest_id, label):
    return {
        "@context": "http://iiif.io/api/presentation/3/context.json",
        "id": manifest_id,
        "type": "Manifest",
        "label": {"en": [label]},
        "items": [],
    }


@pytest.fixture
def remote(monkeypatch):
    """Serve fixture files and synthetic manifests instead of fetching URLs."""
    documents = {
        "https://example.org/iiif/book1/manifest": _manifest_doc(
            "https://example.org/iiif/book1/manifest", "Book 1"
        ),
        "https://example.org/iiif/book2/manifest": _manifest_doc(
            "https://example.org/iiif/book2/manifest", "Book 2"
        ),
        "https://example.org/iiif/collection/sub": {
            "@context": "http://iiif.io/api/presentation/2/context.json",
            "@id": "https://example.org/iiif/collection/sub",
            "@type": "sc:Collection",
            "label": "Sub Collection",
            "manifests": [{"@id": "https://example.org/iiif/book2/manifest", "label": "Book 2"}],
        },
    }
    fetched = []

    def fake_load_json(path_or_url):
        if path_or_url in documents:
            fetched.append(path_or_url)
            return documents[path_or_url]
        return load_json(path_or_url)

    monkeypatch.setattr(traversal, "load_json", fake_load_json)
    return fetched


class TestIterManifests:
    """Tests for iter_manifests() function."""

    def test_single_manifest(self):
        """Test iterating over a single manifest."""
        manifests = list(iter_manifests(str(FIXTURES_DIR / "manifest_v2.json")))

        assert len(manifests) == 1
        manifest_id, (version, manifest) = manifests[0]
        assert manifest_id == "https://example.org/iiif/book1/manifest"
        assert version is Version.V2
        assert len(manifest.canvases) == 3

    def test_v3_collection_with_embedded_sub_collection(self, remote):
        """Test that embedded sub-collections are walked without fetching them."""
        manifests = list(iter_manifests(str(FIXTURES_DIR / "collection_v3.json")))

        assert [m_id for m_id, _ in manifests] == [
            "https://example.org/iiif/book2/manifest",
            "https://example.org/iiif/book1/manifest",
        ]
        assert "https://example.org/iiif/collection/sub" not in remote

    def test_v2_collection_fetches_referenced_sub_collection(self, remote):
        """Test that an empty sub-collection reference is fetched."""
        manifests = list(iter_manifests(str(FIXTURES_DIR / "collection_v2.json")))

        assert [m_id for m_id, _ in manifests] == [
            "https://example.org/iiif/book2/manifest",
            "https://example.org/iiif/book1/manifest",
        ]
        assert remote[0] == "https://example.org/iiif/collection/sub"
        assert all(version is Version.V3 for _, (version, _m) in manifests)

    def test_canvas_root_raises(self, tmp_path):
        """Test that a root that is neither manifest nor collection raises."""
        path = tmp_path / "canvas.json"
        path.write_text(
            '{"@context": "http://iiif.io/api/presentation/3/context.json",'
            ' "id": "c1", "type": "Canvas"}'
        )
        with pytest.raises(UnknownResourceTypeError):
            list(iter_manifests(str(path)))


class TestIsCollection:
    """Tests for is_collection() function."""

    def test_is_collection_with_collection(self):
        """Test that collections of both dialects are identified."""
        assert is_collection(str(FIXTURES_DIR / "collection_v2.json")) is True
        assert is_collection(str(FIXTURES_DIR / "collection_v3.json")) is True

    def test_is_collection_with_manifest(self):
        """Test that manifest is not identified as collection."""
        assert is_collection(str(FIXTURES_DIR / "manifest_v3.json")) is False


class TestIsManifest:
    """Tests for is_manifest() function."""

    def test_is_manifest_with_manifest(self):
        """Test that manifests of both dialects are identified."""
        assert is_manifest(str(FIXTURES_DIR / "manifest_v2.json")) is True
        assert is_manifest(str(FIXTURES_DIR / "manifest_v3.json")) is True

    def test_is_manifest_with_collection(self):
        """Test that collection is not identified as manifest."""
        assert is_manifest(str(FIXTURES_DIR / "collection_v2.json")) is False


class TestNonIIIFDocuments:
    """Tests for the type predicates on JSON that is not IIIF."""

    @pytest.mark.parametrize(
        "content",
        ['{"name": "not iiif"}', '{"@context": "http://schema.org", "@type": "Book"}', "[1, 2, 3]"],
    )
    def test_predicates_return_false(self, tmp_path, content):
        """Test that unrelated JSON is neither a collection nor a manifest."""
        path = tmp_path / "other.json"
        path.write_text(content)

        assert is_collection(str(path)) is False
        assert is_manifest(str(path)) is False
