from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from leitner.domain.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_ACTIVE_BUCKET,
    REQUEST_TIMEOUT,
)

CONFIG_FILES = [
    Path.home() / ".config/leitner/config.toml",
    Path.home() / ".leitner.toml",
]


class AppConfig(BaseSettings):
    """
    Configuration model for leitner.
    Supports loading from:
    1. Environment variables (LEITNER_*)
    2. Config file (~/.config/leitner/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEITNER_",
        extra="ignore",
    )

    # Server
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    deck_file: Path | None = None

    # Scheduling
    max_active_bucket: int = Field(default=MAX_ACTIVE_BUCKET, ge=0)

    # Client
    server_url: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
    request_timeout: float = REQUEST_TIMEOUT

    log_level: str = "INFO"

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

        toml_file = next((f for f in CONFIG_FILES if f.exists()), None)

        # Earlier sources win: CLI overrides, then env, then the config file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_file", mode="before")
    @classmethod
    def resolve_deck_file(cls, v: Any) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v).upper()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/leitner/config.toml (if exists)
    3. Environment variables (LEITNER_*)
    4. cli_overrides (passed from Typer); None values are ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
