"""Tests for quality-config overrides and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from search_quality.analyzer import create_quality_analyzer
from search_quality.config import ConfigurationError, build_quality_config, load_quality_config
from search_quality.models import QualityConfig, QueryDomain

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "quality.yaml"


class TestOverrides:
    """Tests for building configs from partial overrides."""

    def test_no_overrides_gives_defaults(self) -> None:
        config = build_quality_config()
        assert config.max_snippet_length == 800
        assert config.general.authority_boost == 0.3

    def test_nested_merge_keeps_other_fields(self, quality_config: QualityConfig) -> None:
        config = build_quality_config({"medical": {"authority_boost": 0.5}})
        assert config.medical.authority_boost == 0.5
        assert config.medical.keywords == quality_config.medical.keywords
        assert config.medical.min_snippet_length == 15

    def test_patterns_compiled_from_strings(self) -> None:
        config = build_quality_config({"url_patterns": {"avoid": [r"contentfarm\.example"]}})
        assert config.url_patterns.avoid[0].search("https://contentfarm.example/page")
        assert config.url_patterns.trusted

    def test_defaults_untouched(self, quality_config: QualityConfig) -> None:
        build_quality_config({"max_snippet_length": 100})
        assert build_quality_config().max_snippet_length == 800

    def test_override_changes_detection(self) -> None:
        analyzer = create_quality_analyzer({"nim": {"keywords": ["nimlang"]}})
        assert analyzer.detect_domain("nimlang macros") is QueryDomain.NIM
        assert analyzer.detect_domain("nim proc") is QueryDomain.GENERAL

    @pytest.mark.parametrize(
        "overrides",
        [
            {"url_patterns": {"suspicious": ["(unclosed"]}},
            {"snippet_length_tolerance": 0},
            {"max_snippet_length": -1},
            {"medical": {"authority_boost": 2.0}},
            {"unknown_setting": True},
            {"general": {"unknown_setting": True}},
        ],
    )
    def test_invalid_overrides_rejected(self, overrides: dict) -> None:
        with pytest.raises(ConfigurationError):
            build_quality_config(overrides)

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            build_quality_config(["not", "a", "mapping"])  # type: ignore[arg-type]

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            create_quality_analyzer({"snippet_length_tolerance": 0})

    def test_config_is_frozen(self, quality_config: QualityConfig) -> None:
        with pytest.raises(ValidationError):
            quality_config.max_snippet_length = 10  # type: ignore[misc]


class TestLoadQualityConfig:
    """Tests for reading overrides from YAML."""

    def test_none_path_gives_defaults(self, quality_config: QualityConfig) -> None:
        assert load_quality_config(None) == quality_config

    def test_yaml_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "quality.yaml"
        path.write_text("max_snippet_length: 500\nmedical:\n  authority_boost: 0.4\n")
        config = load_quality_config(path)
        assert config.max_snippet_length == 500
        assert config.medical.authority_boost == 0.4

    def test_empty_file(self, tmp_path: Path, quality_config: QualityConfig) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_quality_config(path) == quality_config

    def test_shipped_example(self) -> None:
        config = load_quality_config(REPO_CONFIG)
        assert "affiliate" in config.spam_words
        assert config.medical.authority_boost == 0.6
        assert any(p.search("https://contentfarm.example/x") for p in config.url_patterns.avoid)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_quality_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("medical: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_quality_config(path)

    def test_top_level_list(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError):
            load_quality_config(path)
