"""Tests for multilingual value decoding and label selection."""

import pytest

from limpet.iiif.language import (
    EMPTY,
    NO_VALUE_FOUND,
    Lang,
    LanguageMap,
    decode,
    decode_language_map,
    decode_value,
    extract_label,
)


class TestDecode:
    """Tests for decode() across the accepted shapes."""

    def test_bare_string_is_default_tagged(self):
        """Test that a plain v2 string has no language information."""
        result = decode("Book 1")
        assert result.entries == ((Lang.DEFAULT, ("Book 1",)),)

    def test_value_object_with_language(self):
        """Test a single v2 value object."""
        result = decode({"@value": "Book 1", "@language": "en"})
        assert result.get("en") == ("Book 1",)

    def test_value_object_without_language_is_none(self):
        """Test that a value object without @language maps to the none key."""
        result = decode({"@value": "MS 1"})
        assert result.keys() == [Lang.NONE]

    def test_value_object_with_null_language_is_none(self):
        """Test that an explicit null @language behaves like a missing one."""
        result = decode({"@value": "x", "@language": None})
        assert result.get(Lang.NONE) == ("x",)

        mixed = decode([{"@value": "MS 1", "@language": None}, {"@value": "Book", "@language": "en"}])
        assert mixed.keys() == [Lang.NONE, "en"]

    def test_value_object_array_groups_by_language(self):
        """Test that repeated languages merge in first-seen order."""
        result = decode([
            {"@value": "Hours", "@language": "en"},
            {"@value": "Stunden", "@language": "de"},
            {"@value": "Prayers", "@language": "en"},
        ])
        assert result.keys() == ["en", "de"]
        assert result.get("en") == ("Hours", "Prayers")

    def test_array_may_mix_strings(self):
        """Test that bare strings inside a value array are default tagged."""
        result = decode(["Plain", {"@value": "Tagged", "@language": "fr"}])
        assert result.get(Lang.DEFAULT) == ("Plain",)
        assert result.get("fr") == ("Tagged",)

    def test_native_language_map(self):
        """Test the v3 language map shape keeps key order."""
        result = decode({"none": ["MS 1"], "en": ["Book", "Volume"]})
        assert result.keys() == [Lang.NONE, "en"]
        assert result.get("en") == ("Book", "Volume")

    def test_empty_language_map(self):
        """Test that an empty v3 map decodes to an empty map."""
        assert decode({}) == EMPTY

    def test_invalid_shape_raises(self):
        """Test that numbers and malformed maps are rejected."""
        with pytest.raises(ValueError):
            decode(42)
        with pytest.raises(ValueError):
            decode({"en": "not a list"})

    def test_decode_value_rejects_language_map(self):
        """Test that the v2-only decoder does not accept v3 maps."""
        with pytest.raises(ValueError):
            decode_value({"en": ["Book"]})

    def test_decode_language_map_rejects_string(self):
        """Test that the v3-only decoder does not accept strings."""
        with pytest.raises(ValueError):
            decode_language_map("Book")


class TestExtractLabel:
    """Tests for extract_label() fallback order."""

    LABEL = LanguageMap((
        (Lang.DEFAULT, ("Default title",)),
        ("en", ("English title",)),
        (Lang.NONE, ("MS 1",)),
    ))

    def test_requested_language_wins(self):
        """Test that an exact language match is used first."""
        assert extract_label("en", self.LABEL) == "English title"

    def test_falls_back_to_none(self):
        """Test that a missing language falls back to the none entry."""
        assert extract_label("de", self.LABEL) == "MS 1"

    def test_falls_back_to_default(self):
        """Test that without a none entry the default entry is used."""
        label = LanguageMap(tuple(e for e in self.LABEL.entries if e[0] is not Lang.NONE))
        assert extract_label("de", label) == "Default title"

    def test_falls_back_to_first_entry(self):
        """Test that any entry is better than nothing."""
        label = decode({"fr": ["Titre"], "it": ["Titolo"]})
        assert extract_label("de", label) == "Titre"

    def test_empty_map(self):
        """Test the literal placeholder for an empty map."""
        assert extract_label("en", EMPTY) == NO_VALUE_FOUND == "[No language value found]"

    def test_multiple_values_are_joined(self):
        """Test that several values in one language are joined."""
        label = decode({"en": ["Book", "Volume 2"]})
        assert extract_label("en", label) == "Book; Volume 2"
