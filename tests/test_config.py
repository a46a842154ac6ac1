import pytest

from api.services.config import DEFAULT_LAYERS, EngineConfig


def test_defaults_are_valid():
    config = EngineConfig()
    assert config.layers == DEFAULT_LAYERS
    assert config.aspect_set == "major"


@pytest.mark.parametrize(
    "overrides",
    [
        {"aspect_set": "minor"},
        {"bodies": ("sun", "vulcan")},
        {"layers": ("swisseph", "astrolabe")},
        {"default_house_system": "Z"},
    ],
)
def test_bad_settings_are_rejected(overrides):
    with pytest.raises(ValueError):
        EngineConfig(**overrides)


@pytest.mark.parametrize(
    "name,value",
    [
        ("CHART_ASPECT_SET", "minor"),
        ("CHART_BODIES", "sun,vulcan"),
        ("CHART_PROVIDER_LAYERS", "swisseph,astrolabe"),
    ],
)
def test_from_env_fails_on_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        EngineConfig.from_env()


def test_from_env_reads_lists(monkeypatch):
    monkeypatch.setenv("CHART_BODIES", "sun, moon,chiron")
    monkeypatch.setenv("CHART_PROVIDER_LAYERS", "swisseph")
    monkeypatch.setenv("CHART_ASPECT_SET", "Extended")
    config = EngineConfig.from_env()
    assert config.bodies == ("sun", "moon", "chiron")
    assert config.layers == ("swisseph", "synthetic")
    assert config.aspect_set == "extended"
