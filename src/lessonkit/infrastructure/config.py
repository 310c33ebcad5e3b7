"""Configuration management for lessonkit.

This module provides a unified configuration system that supports:
- Configuration files in TOML format
- Environment variables
- Multiple configuration file locations (project, user, system)
- Type-safe configuration using Pydantic

Configuration Priority (highest to lowest):
1. Environment variables
2. Project configuration file (.lessonkit/config.toml or lessonkit.toml)
3. User configuration file (~/.config/lessonkit/config.toml)
4. System configuration file (/etc/lessonkit/config.toml)
5. Default values

Environment Variable Naming:
- Nested fields: LESSONKIT_<SECTION>__<FIELD> (e.g., LESSONKIT_LINKS__TIMEOUT)
"""

import logging
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from lessonkit.errors import ConfigError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {VALID_LOG_LEVELS}, got {v}")
        return v_upper


class ChecksConfig(BaseModel):
    """Lesson integrity check configuration."""

    min_quiz_options: int = Field(
        default=2,
        ge=2,
        le=26,
        description="Minimum number of options a quiz question must offer",
    )

    planned_topics_are_warnings: bool = Field(
        default=False,
        description="Report planned-but-unwritten topics as warnings instead of info",
    )

    snippet_languages: list[str] = Field(
        default_factory=lambda: ["python", "py"],
        description="Code block languages whose snippets are syntax-checked",
    )

    @field_validator("snippet_languages")
    @classmethod
    def lower_case_languages(cls, v: list[str]) -> list[str]:
        return [lang.lower() for lang in v]


class LinksConfig(BaseModel):
    """Link validation configuration."""

    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per HTTP request (seconds)",
    )

    max_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Number of links checked in parallel",
    )

    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries for a link after a network error",
    )

    user_agent: str = Field(
        default="lessonkit-link-checker/1.0",
        description="User-Agent header sent with link checks",
    )


class DraftsConfig(BaseModel):
    """Draft comparison configuration."""

    similarity_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Similarity ratio at or above which two drafts count as near-duplicates",
    )


class CsvConfig(BaseModel):
    """CSV reading and writing configuration."""

    encoding: str = Field(default="utf-8", description="File encoding for CSV files")

    delimiter: str = Field(default=",", description="CSV field delimiter")

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"Delimiter must be a single character, got {v!r}")
        return v


class LessonKitConfig(BaseSettings):
    """Main lessonkit configuration.

    Loaded from multiple sources in priority order: environment variables >
    project config > user config > system config > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="LESSONKIT_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    checks: ChecksConfig = Field(
        default_factory=ChecksConfig,
        description="Lesson integrity checks",
    )

    links: LinksConfig = Field(
        default_factory=LinksConfig,
        description="Link validation",
    )

    drafts: DraftsConfig = Field(
        default_factory=DraftsConfig,
        description="Draft comparison",
    )

    csv: CsvConfig = Field(
        default_factory=CsvConfig,
        description="CSV input/output",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources and their priority for settings.

        Priority order (highest to lowest):
        1. Environment variables
        2. Project configuration file
        3. User configuration file
        4. System configuration file
        5. Init settings (programmatic)
        """
        config_files = find_config_files()

        # pydantic-settings gives sources on the left higher priority
        toml_sources = []
        for location in ("project", "user", "system"):
            config_file = config_files[location]
            if config_file:
                toml_sources.append(TomlConfigSettingsSource(settings_cls, toml_file=config_file))
                logger.debug(f"Using {location} config: {config_file}")

        return (env_settings, *toml_sources, init_settings)


def find_config_files() -> dict[str, Path | None]:
    """Find configuration files in standard locations.

    Returns:
        Dictionary with keys 'system', 'user', 'project', each containing
        a Path to the config file if it exists, or None otherwise.
    """
    config_files: dict[str, Path | None] = {
        "system": None,
        "user": None,
        "project": None,
    }

    system_config = Path("/etc/lessonkit/config.toml")
    if system_config.exists():
        config_files["system"] = system_config

    user_config_dir = Path(platformdirs.user_config_dir("lessonkit", appauthor=False))
    user_config = user_config_dir / "config.toml"
    if user_config.exists():
        config_files["user"] = user_config

    # .lessonkit/config.toml wins over lessonkit.toml
    cwd = Path.cwd()
    for project_config in (cwd / ".lessonkit" / "config.toml", cwd / "lessonkit.toml"):
        if project_config.exists():
            config_files["project"] = project_config
            break

    return config_files


def get_config_file_locations() -> dict[str, Path]:
    """Get the standard configuration file locations (which may not exist)."""
    user_config_dir = Path(platformdirs.user_config_dir("lessonkit", appauthor=False))
    return {
        "system": Path("/etc/lessonkit/config.toml"),
        "user": user_config_dir / "config.toml",
        "project": Path.cwd() / ".lessonkit" / "config.toml",
    }


_config: LessonKitConfig | None = None


def get_config(reload: bool = False) -> LessonKitConfig:
    """Get the global configuration instance.

    Args:
        reload: If True, reload the configuration from files and environment.

    Raises:
        ConfigError: If a configuration source holds an invalid value.
    """
    global _config

    if _config is None or reload:
        try:
            _config = LessonKitConfig()
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration:\n{e}") from e

    return _config


def create_example_config() -> str:
    """Create an example configuration file content."""
    return """# lessonkit Configuration File
#
# Configuration files are loaded from (in priority order):
#   1. .lessonkit/config.toml or lessonkit.toml (project directory)
#   2. ~/.config/lessonkit/config.toml (user directory)
#   3. /etc/lessonkit/config.toml (system directory, Linux/Unix only)
#
# Environment variables override any setting (highest priority).
# Nested settings use double underscores: LESSONKIT_<SECTION>__<KEY>
#
# Examples:
#   LESSONKIT_LOGGING__LOG_LEVEL=DEBUG
#   LESSONKIT_LINKS__TIMEOUT=5

[logging]
# Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL
log_level = "INFO"

[checks]
# Minimum number of options a quiz question must offer
min_quiz_options = 2

# Report "planned topic" markers (TODO, Coming soon, ...) as warnings
planned_topics_are_warnings = false

# Code block languages whose snippets are syntax-checked
snippet_languages = ["python", "py"]

[links]
# Timeout per HTTP request (seconds)
timeout = 10.0

# Number of links checked in parallel
max_workers = 8

# Retries for a link after a network error
max_retries = 2

# User-Agent header sent with link checks
user_agent = "lessonkit-link-checker/1.0"

[drafts]
# Similarity ratio at or above which two drafts count as near-duplicates
similarity_threshold = 0.8

[csv]
# File encoding for CSV files
encoding = "utf-8"

# CSV field delimiter
delimiter = ","
"""


def write_example_config(location: str = "user") -> Path:
    """Write an example configuration file to a standard location.

    Args:
        location: One of "user", "project" or "system".

    Returns:
        Path to the created configuration file.

    Raises:
        ValueError: If location is invalid.
        PermissionError: If cannot write to the location.
    """
    locations = get_config_file_locations()

    if location not in locations:
        raise ValueError(f"Invalid location '{location}'. Must be one of: user, project, system")

    config_path = locations[location]
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(create_example_config(), encoding="utf-8")

    logger.info(f"Created example configuration at: {config_path}")

    return config_path
