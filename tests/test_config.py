import json
import logging

import pytest

from randompic.utils.config import BuildConfig, load_domain, normalize_base_url


@pytest.mark.parametrize("raw, expected", [
    ("https://example.com/", "https://example.com"),
    ("https://example.com", "https://example.com"),
    ("https://cdn.example.com/pics//", "https://cdn.example.com/pics"),
    ("  https://example.com/ ", "https://example.com"),
    ("", ""),
    (None, ""),
])
def test_normalize_base_url(raw, expected):
    assert normalize_base_url(raw) == expected


def test_env_domain_wins_over_config_file(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"domain": "https://file.example"}))
    assert load_domain(tmp_path, {"DOMAIN": "https://env.example/"}) == "https://env.example"


def test_config_file_domain(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"domain": "https://file.example/"}))
    assert load_domain(tmp_path, {}) == "https://file.example"


def test_no_config_means_relative_urls(tmp_path):
    assert load_domain(tmp_path, {}) == ""


def test_malformed_config_warns_and_falls_back(tmp_path, caplog):
    (tmp_path / "config.json").write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="config"):
        assert load_domain(tmp_path, {}) == ""
    assert "Failed to parse config.json" in caplog.text


def test_non_object_config_is_ignored(tmp_path, caplog):
    (tmp_path / "config.json").write_text(json.dumps(["https://x.example"]))
    with caplog.at_level(logging.WARNING, logger="config"):
        assert load_domain(tmp_path, {}) == ""
    assert "not a JSON object" in caplog.text


def test_config_without_domain_is_not_reported_as_loaded(tmp_path, caplog):
    (tmp_path / "config.json").write_text(json.dumps({"theme": "dark"}))
    with caplog.at_level(logging.INFO, logger="config"):
        assert load_domain(tmp_path, {}) == ""
    assert "Loaded domain" not in caplog.text


def test_config_domain_is_reported_as_loaded(tmp_path, caplog):
    (tmp_path / "config.json").write_text(json.dumps({"domain": "https://file.example"}))
    with caplog.at_level(logging.INFO, logger="config"):
        load_domain(tmp_path, {})
    assert "Loaded domain from config.json." in caplog.text


def test_build_config_from_env(tmp_path):
    cfg = BuildConfig.from_env(tmp_path, {
        "DOMAIN": "https://pic.example/",
        "RANDOMPIC_DIST_DIR": str(tmp_path / "public"),
        "RANDOMPIC_FETCH_LIBS": "yes",
    })
    assert cfg.domain == "https://pic.example"
    assert cfg.src_dir == tmp_path.resolve() / "ri"
    assert cfg.assets_dir == tmp_path / "public" / "ri"
    assert cfg.categories == ("h", "v")
    assert cfg.fetch_libs is True


def test_build_config_defaults(tmp_path):
    cfg = BuildConfig.from_env(tmp_path, {})
    assert cfg.dist_dir == tmp_path.resolve() / "dist"
    assert cfg.fetch_libs is False
    assert cfg.lib_cdn == "https://unpkg.com"
