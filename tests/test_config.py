"""
Unit Tests for Compiler Configuration
=====================================
"""

import pytest

from isagen.config import CompilerConfig, Variant


@pytest.fixture
def clean_env(monkeypatch):
    """Fixture: remove every ISAGEN_* variable."""
    for name in ("ISAGEN_VARIANT", "ISAGEN_DELIMITER", "ISAGEN_ENCODING", "ISAGEN_SHARE_IDENTIFIERS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestVariant:
    def test_field_counts(self):
        assert Variant.STANDARD.field_count == 7
        assert Variant.EXTENDED.field_count == 8

    def test_category_column(self):
        assert not Variant.STANDARD.has_category
        assert Variant.EXTENDED.has_category


class TestCompilerConfig:
    """Tests for defaults, validation and overrides."""

    def test_defaults(self):
        config = CompilerConfig()
        assert config.variant is Variant.STANDARD
        assert config.delimiter == ";"
        assert config.encoding == "utf-8"
        assert config.share_identifiers_across_categories is False

    @pytest.mark.parametrize("delimiter", ["", ";;"])
    def test_delimiter_must_be_one_character(self, delimiter):
        with pytest.raises(ValueError):
            CompilerConfig(delimiter=delimiter)

    def test_unknown_encoding(self):
        with pytest.raises(ValueError, match="unknown encoding"):
            CompilerConfig(encoding="no-such-codec")

    def test_overrides_skip_none(self):
        config = CompilerConfig().with_overrides(variant=Variant.EXTENDED, delimiter=None)
        assert config.variant is Variant.EXTENDED
        assert config.delimiter == ";"


class TestFromEnv:
    """Tests for CompilerConfig.from_env()."""

    def test_no_variables(self, clean_env):
        assert CompilerConfig.from_env() == CompilerConfig()

    def test_all_variables(self, clean_env):
        clean_env.setenv("ISAGEN_VARIANT", "Extended")
        clean_env.setenv("ISAGEN_DELIMITER", ",")
        clean_env.setenv("ISAGEN_ENCODING", "latin-1")
        clean_env.setenv("ISAGEN_SHARE_IDENTIFIERS", "yes")

        config = CompilerConfig.from_env()
        assert config.variant is Variant.EXTENDED
        assert config.delimiter == ","
        assert config.encoding == "latin-1"
        assert config.share_identifiers_across_categories is True

    def test_invalid_values_ignored(self, clean_env, caplog):
        clean_env.setenv("ISAGEN_VARIANT", "turbo")
        clean_env.setenv("ISAGEN_DELIMITER", "::")
        clean_env.setenv("ISAGEN_ENCODING", "no-such-codec")

        config = CompilerConfig.from_env()
        assert config == CompilerConfig()
        assert "ISAGEN_VARIANT" in caplog.text
        assert "ISAGEN_DELIMITER" in caplog.text
        assert "ISAGEN_ENCODING" in caplog.text

    def test_share_false(self, clean_env):
        clean_env.setenv("ISAGEN_SHARE_IDENTIFIERS", "0")
        assert CompilerConfig.from_env().share_identifiers_across_categories is False
