from pathlib import Path

from apilisting.settings import JavaSettings, ListingSettings, load_settings


# Tests
def test_default_settings():
    settings = ListingSettings()

    assert settings.indent_width == 4
    assert settings.respect_gitignore is True
    assert "package-info.java" in settings.excluded_file_names
    assert settings.excluded_path_fragments == ["implementation"]
    assert isinstance(settings.languages["java"], JavaSettings)


def test_load_settings_precedence(tmp_path: Path, monkeypatch):
    config = tmp_path / "listing.toml"
    config.write_text(
        'review_name = "toml"\nindent_width = 2\nnum_workers = 3\n', encoding="utf-8"
    )
    monkeypatch.setenv("APILISTING_NUM_WORKERS", "5")

    settings = load_settings(toml_file=str(config), review_name="explicit")

    # keyword overrides, then environment, then the TOML file
    assert settings.review_name == "explicit"
    assert settings.num_workers == 5
    assert settings.indent_width == 2


def test_load_settings_language_extensions(tmp_path: Path):
    config = tmp_path / "listing.json"
    config.write_text('{"languages": {"java": {"extra_extensions": [".jav"]}}}', encoding="utf-8")

    settings = load_settings(json_file=str(config))
    assert settings.languages["java"].extra_extensions == [".jav"]
