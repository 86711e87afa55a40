"""Tests for configuration loading."""

import pytest

from sectionreview_core.config import load_config
from sectionreview_core.sections import build_registry


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["store"] == "noop"
    assert config["debounce_seconds"] == 1.0
    assert config["required_sections"] is None
    assert config["sections"] is None
    assert config["field_labels"] == {}


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".sectionreview.yml"
    cfg.write_text("store: sqlite\nstore_path: reviews.db\ndebounce_seconds: 2.5\n")
    config = load_config(config_path=str(cfg))
    assert config["store"] == "sqlite"
    assert config["store_path"] == "reviews.db"
    assert config["debounce_seconds"] == 2.5


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".sectionreview.yml"
    cfg.write_text("store: sqlite\n")
    config = load_config(config_path=str(cfg), cli_overrides={"store": "gist"})
    assert config["store"] == "gist"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".sectionreview.yml"
    cfg.write_text("store: sqlite\n")
    config = load_config(config_path=str(cfg), cli_overrides={"store": None})
    assert config["store"] == "sqlite"


def test_invalid_debounce_raises(tmp_path):
    cfg = tmp_path / ".sectionreview.yml"
    cfg.write_text("debounce_seconds: soon\n")
    with pytest.raises(ValueError):
        load_config(config_path=str(cfg))


def test_github_token_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_custom_sections_from_file(tmp_path):
    cfg = tmp_path / ".sectionreview.yml"
    cfg.write_text(
        "sections:\n"
        "  - id: legal-documents\n"
        "    title: Legal\n"
        "    fields: [doc_a, doc_b]\n"
        "field_labels:\n"
        "  doc_a: Documento A\n"
    )
    registry = build_registry(load_config(config_path=str(cfg)))
    assert registry.ids == ["legal-documents"]
    assert registry.label("doc_a") == "Documento A"


def test_field_labels_not_shared_reference(tmp_path):
    """Mutating one config's labels must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["field_labels"]["doc_a"] = "Documento A"
    assert config_b["field_labels"] == {}
