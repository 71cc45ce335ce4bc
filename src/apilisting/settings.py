from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class LanguageSettings(BaseModel):
    """Base class for language-specific settings."""

    extra_extensions: List[str] = Field(
        default_factory=list,
        description="A list of additional file extensions to be associated with this language.",
    )


class JavaSettings(LanguageSettings):
    """Settings specific to the Java parser."""

    pass


def _get_default_languages() -> dict[str, LanguageSettings]:
    return {"java": JavaSettings()}


class ListingSettings(BaseSettings):
    """Top-level settings for producing an API listing."""

    model_config = SettingsConfigDict(env_prefix="APILISTING_")

    review_name: Optional[str] = Field(
        default=None,
        description="Name of the listing. Defaults to the source directory or archive name.",
    )
    source_path: Optional[str] = Field(
        default=None,
        description="A source directory, a single source file or a sources archive (.jar/.zip).",
    )
    output_path: Optional[str] = Field(
        default=None,
        description="Where to write the JSON listing. Nothing is written when unset.",
    )
    num_workers: Optional[int] = Field(
        default=None,
        description=(
            "Number of worker threads used to parse files. If None, it defaults to "
            "`os.cpu_count() - 1` (min 1, fallback 4)."
        ),
    )
    indent_width: int = Field(
        default=4, description="Number of spaces per nesting level in the listing."
    )
    ignored_dirs: set[str] = Field(
        default_factory=lambda: {
            ".git",
            ".hg",
            ".svn",
            ".idea",
            ".vscode",
            ".gradle",
        },
        description="A set of directory names to ignore during source discovery.",
    )
    excluded_path_fragments: List[str] = Field(
        default_factory=lambda: ["implementation"],
        description="Files whose relative path contains any of these strings are skipped.",
    )
    excluded_file_names: set[str] = Field(
        default_factory=lambda: {"package-info.java", "module-info.java"},
        description="File names that never contribute to the listing.",
    )
    exclude_patterns: List[str] = Field(
        default_factory=list,
        description="Additional gitwildmatch patterns (relative to the source root) to skip.",
    )
    respect_gitignore: bool = Field(
        default=True,
        description="If True, files matched by .gitignore files under the source root are skipped.",
    )
    languages: dict[str, LanguageSettings] = Field(
        default_factory=_get_default_languages,
        description="A dictionary of language-specific settings, keyed by language name.",
    )


def load_settings(
    env_prefix: Optional[str] = "APILISTING_",
    env_file: Optional[str] = None,
    toml_file: Optional[str] = None,
    json_file: Optional[str] = None,
    **kwargs,
) -> ListingSettings:
    """
    Build ListingSettings from keyword overrides, environment variables
    (prefixed with *env_prefix*) and optional env/TOML/JSON files.
    """
    config_dict = SettingsConfigDict(
        env_prefix=env_prefix or "",
        env_file=env_file,
        toml_file=toml_file,
        json_file=json_file,
    )

    class Settings(ListingSettings):
        model_config = config_dict

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls,
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ):
            sources = [init_settings, env_settings, dotenv_settings]
            if toml_file:
                sources.append(TomlConfigSettingsSource(settings_cls))
            if json_file:
                sources.append(JsonConfigSettingsSource(settings_cls))
            sources.append(file_secret_settings)
            return tuple(sources)

    return Settings(**kwargs)
