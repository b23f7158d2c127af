"""Configuration loading tests."""

import pytest
import yaml

from wikirank.utils.config import ConfigManager, load_config, get_config


def write_config(tmp_path, data):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def base_data():
    return {
        "crawler": {
            "seed_page": "/wiki/Tennis",
            "keywords": ["tennis", "racket"],
            "max_pages": 25,
        }
    }


def test_load_config_with_defaults(tmp_path):
    config = load_config(str(write_config(tmp_path, base_data())))

    assert config.crawler.seed_page == "/wiki/Tennis"
    assert config.crawler.max_pages == 25
    assert config.crawler.throttle_every == 200
    assert config.crawler.throttle_pause == 2.0
    assert config.pagerank.epsilon == 0.0001
    assert config.logging.level == "INFO"
    assert config.monitoring.metrics_enabled is False
    assert get_config() is config


def test_sections_override_defaults(tmp_path):
    data = base_data()
    data["pagerank"] = {"epsilon": 0.001, "top_k": 5}
    data["logging"] = {"level": "DEBUG", "json": True}

    config = load_config(str(write_config(tmp_path, data)))

    assert config.pagerank.epsilon == 0.001
    assert config.pagerank.top_k == 5
    assert config.logging.level == "DEBUG"
    assert config.logging.json is True


@pytest.mark.parametrize("section,key,value", [
    ("crawler", "seed_page", ""),
    ("crawler", "keywords", []),
    ("crawler", "max_pages", 0),
    ("crawler", "throttle_every", 0),
    ("crawler", "throttle_pause", -1),
    ("pagerank", "epsilon", 0),
    ("pagerank", "top_k", 0),
])
def test_invalid_values_are_rejected(tmp_path, section, key, value):
    data = base_data()
    data.setdefault(section, {})[key] = value

    with pytest.raises(ValueError):
        load_config(str(write_config(tmp_path, data)))


def test_missing_crawler_section(tmp_path):
    with pytest.raises(ValueError):
        load_config(str(write_config(tmp_path, {"pagerank": {"epsilon": 0.1}})))


def test_unknown_key_is_rejected(tmp_path):
    data = base_data()
    data["crawler"]["max_depth"] = 3

    with pytest.raises(TypeError):
        load_config(str(write_config(tmp_path, data)))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "absent.yaml")).load_config()


def test_config_before_load_fails(tmp_path):
    with pytest.raises(ValueError):
        ConfigManager(str(tmp_path / "absent.yaml")).config
