"""Tests for SchemeMapping."""

import pytest

from vulnmatch.engines.match_scanner.schemes import (
    DEFAULT_SCHEME_LANGUAGES,
    SCHEME_LANGUAGES_ENV,
    SchemeMapping,
)


class TestDefaults:
    def test_known_ecosystems(self):
        schemes = SchemeMapping()
        assert schemes["gomod"] == "go"
        assert schemes["npm"] == "Javascript"

    def test_java_is_unmapped(self):
        schemes = SchemeMapping()
        assert "semanticdb" not in schemes
        assert "maven" not in schemes

    def test_conditions_sorted_by_scheme(self):
        schemes = SchemeMapping({"npm": "Javascript", "gomod": "go", "cargo": "rust"})
        assert schemes.conditions() == [
            ("cargo", "rust"),
            ("gomod", "go"),
            ("npm", "Javascript"),
        ]

    def test_empty_mapping(self):
        schemes = SchemeMapping({})
        assert len(schemes) == 0
        assert schemes.conditions() == []

    def test_defaults_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_SCHEME_LANGUAGES["pip"] = "python"  # type: ignore[index]

    def test_mapping_is_a_copy(self):
        source = {"gomod": "go"}
        schemes = SchemeMapping(source)
        source["npm"] = "Javascript"
        assert "npm" not in schemes


class TestParse:
    def test_overlay_on_defaults(self):
        schemes = SchemeMapping.parse("pip=python, gomod=golang")
        assert schemes["pip"] == "python"
        assert schemes["gomod"] == "golang"
        assert schemes["npm"] == "Javascript"

    def test_blank_string_keeps_defaults(self):
        assert dict(SchemeMapping.parse("")) == dict(DEFAULT_SCHEME_LANGUAGES)

    def test_trailing_comma_ignored(self):
        assert SchemeMapping.parse("pip=python,")["pip"] == "python"

    @pytest.mark.parametrize("raw", ["pip", "=python", "pip=", "pip = "])
    def test_malformed_entry(self, raw):
        with pytest.raises(ValueError, match="invalid scheme mapping entry"):
            SchemeMapping.parse(raw)

    def test_custom_base(self):
        schemes = SchemeMapping.parse("pip=python", base={})
        assert dict(schemes) == {"pip": "python"}


class TestFromEnv:
    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv(SCHEME_LANGUAGES_ENV, "cargo=rust")
        schemes = SchemeMapping.from_env()
        assert schemes["cargo"] == "rust"
        assert schemes["gomod"] == "go"

    def test_unset_env(self, monkeypatch):
        monkeypatch.delenv(SCHEME_LANGUAGES_ENV, raising=False)
        assert dict(SchemeMapping.from_env()) == dict(DEFAULT_SCHEME_LANGUAGES)
