from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from repetita.domain.constants import DEFAULT_MAX_NEW, DEFAULT_MAX_REVIEW, MAX_INTERVAL_DAYS

CONFIG_FILES = [
    Path("~/.config/repetita/config.toml"),
    Path("~/.repetita.toml"),
]
DEFAULT_RECORDS_FILE = "records.yaml"


class AppConfig(BaseSettings):
    """
    Configuration model for repetita.
    Supports loading from:
    1. Environment variables (REPETITA_*)
    2. Config file (~/.config/repetita/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="REPETITA_",
        extra="ignore",
    )

    # Record source
    records_path: Path | None = None
    default_deck: str | None = None

    # Session caps
    max_new: int = Field(default=DEFAULT_MAX_NEW, ge=0)
    max_review: int = Field(default=DEFAULT_MAX_REVIEW, ge=0)

    # Scheduler
    max_interval_days: int = Field(default=MAX_INTERVAL_DAYS, ge=1)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing config file wins
        toml_file = None
        for f in CONFIG_FILES:
            candidate = f.expanduser()
            if candidate.exists():
                toml_file = candidate
                break

        # Earlier sources take priority: CLI overrides, then env, then the file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("records_path", mode="before")
    @classmethod
    def resolve_records_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/repetita/config.toml (if exists)
    3. Environment variables (REPETITA_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.records_path is None:
        config.records_path = (Path.cwd() / DEFAULT_RECORDS_FILE).resolve()

    return config
