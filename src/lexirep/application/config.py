import logging
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexirep.domain.constants import (
    DEFAULT_INITIAL_EFACTOR,
    DEFAULT_LOAD_BALANCE,
    DEFAULT_MAX_FUZZING_DAYS,
    DEFAULT_MAX_NEW_PER_DAY,
    DEFAULT_MAX_REVIEW_PER_DAY,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_EFACTOR,
    DEFAULT_SESSION_SIZE,
)
from lexirep.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


def config_file_candidates() -> list[Path]:
    return [
        Path.home() / ".config/lexirep/config.toml",
        Path.home() / ".lexirep.toml",
    ]


class SrsSettings(BaseSettings):
    """
    Spaced-repetition settings.
    Supports loading from:
    1. Environment variables (LEXIREP_*)
    2. Config file (~/.config/lexirep/config.toml)
    3. Manual overrides (CLI or caller)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIREP_",
        extra="ignore",
    )

    # SM-2
    initial_efactor: float = Field(default=DEFAULT_INITIAL_EFACTOR, gt=0)
    minimum_efactor: float = Field(default=DEFAULT_MINIMUM_EFACTOR, gt=0)
    maximum_interval: int = Field(default=DEFAULT_MAXIMUM_INTERVAL, ge=1)

    # Load balancing
    load_balance: bool = DEFAULT_LOAD_BALANCE
    max_fuzzing_days: int = Field(default=DEFAULT_MAX_FUZZING_DAYS, ge=0)

    # Daily limits
    max_new_per_day: int = Field(default=DEFAULT_MAX_NEW_PER_DAY, ge=0)
    max_review_per_day: int = Field(default=DEFAULT_MAX_REVIEW_PER_DAY, ge=0)
    session_size: int = Field(default=DEFAULT_SESSION_SIZE, ge=1)

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

        # First existing file wins
        toml_file = next((f for f in config_file_candidates() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @model_validator(mode="after")
    def check_efactor_floor(self) -> "SrsSettings":
        if self.minimum_efactor > self.initial_efactor:
            raise ValueError(
                f"minimum_efactor ({self.minimum_efactor}) exceeds "
                f"initial_efactor ({self.initial_efactor})"
            )
        return self


def resolve_config(overrides: dict[str, Any] | None = None) -> SrsSettings:
    """
    Multi-layered configuration resolution.
    1. Defaults in SrsSettings
    2. ~/.config/lexirep/config.toml (if exists)
    3. Environment variables (LEXIREP_*)
    4. overrides (passed from Typer or the caller)

    Raises:
        ConfigurationError: If any layer supplies an out-of-range value.
    """
    cleaned = {k: v for k, v in (overrides or {}).items() if v is not None}
    try:
        return SrsSettings(**cleaned)
    except ValidationError as e:
        logger.error(f"Invalid SRS settings: {e}")
        raise ConfigurationError(str(e)) from e
