import yaml

from testsuites.contract_testing.framework.config_loader import PROJECT_ROOT, ConfigLoader


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"schemas": {"directory": "schemas"}, "generator": {"array_max_items": 4}}),
        encoding="utf-8",
    )

    ConfigLoader.reset()
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("schemas.directory") == "schemas"
    assert loader.get("generator.array_min_items", 1) == 1

    ConfigLoader.reset()
    monkeypatch.setenv("GENERATOR_ARRAY_MAX_ITEMS", "7")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("generator.array_max_items", 3) == 7

    ConfigLoader.reset()


def test_reload_updates_values(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"generator": {"seed": 5}}), encoding="utf-8")

    ConfigLoader.reset()
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("generator.seed") == 5

    config_path.write_text(yaml.dump({"generator": {"seed": 15}}), encoding="utf-8")
    loader.reload()
    assert loader.get("generator.seed") == 15

    ConfigLoader.reset()


def test_get_path_resolves_relative_to_project_root(monkeypatch, tmp_path):
    monkeypatch.delenv("SCHEMAS_DIRECTORY", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"schemas": {"directory": "data/schemas"}}), encoding="utf-8"
    )

    ConfigLoader.reset()
    loader = ConfigLoader(config_path=config_path)
    assert loader.get_path("schemas.directory") == PROJECT_ROOT / "data" / "schemas"

    monkeypatch.setenv("SCHEMAS_DIRECTORY", str(tmp_path))
    assert loader.get_path("schemas.directory") == tmp_path
    assert loader.get_path("missing.key") is None

    ConfigLoader.reset()


def test_missing_file_falls_back_to_defaults(tmp_path):
    ConfigLoader.reset()
    loader = ConfigLoader(config_path=tmp_path / "absent.yaml")
    assert loader.get("logging.level", "INFO") == "INFO"
    assert loader.get_section("generator") == {}

    ConfigLoader.reset()
