"""Handles the parsing and validation of the ChapterRelay configuration file."""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

ProviderName = Literal["gemini", "gemma", "google", "mock"]


class BackendSettings(BaseModel):
    """Settings for one translation backend in the fallback chain."""

    model_config = ConfigDict(extra="forbid")

    provider: ProviderName
    name: str | None = None
    model: str | None = None
    api_key: str | None = None
    priority: int | None = None
    max_output_tokens: int | None = None
    extra: dict[str, Any] | None = None

    @property
    def display_name(self) -> str:
        """Return the identifier recorded in results for this backend."""
        return self.name or self.model or self.provider


def _default_backends() -> list[BackendSettings]:
    return [
        BackendSettings(provider="gemini", model="gemini-2.5-flash"),
        BackendSettings(provider="gemini", model="gemini-2.5-flash-lite"),
    ]


class RelayConfig(BaseModel):
    """The root configuration for a ChapterRelay run."""

    model_config = ConfigDict(extra="forbid")

    source_lang: str = "auto"
    target_lang: str = "en"
    backends: list[BackendSettings] = Field(default_factory=_default_backends)
    last_resort: BackendSettings | None = Field(default_factory=lambda: BackendSettings(provider="google"))
    instructions: str | None = None

    concurrency_limit: int = Field(default=3, ge=1)
    concurrent: bool = True
    stagger_interval: float = Field(default=1.0, ge=0)
    call_timeout: float = Field(default=120.0, gt=0)

    max_chunk_size: int = Field(default=4000, ge=1)
    last_resort_chunk_size: int = Field(default=4500, ge=1)

    batch_size: int = Field(default=20, ge=1)
    min_batch_size: int = Field(default=1, ge=1)

    transient_retries: int = Field(default=1, ge=0)
    last_resort_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=2.0, ge=0)
    retry_backoff_factor: float = Field(default=2.0, ge=1)

    @model_validator(mode="after")
    def _check_batch_bounds(self) -> "RelayConfig":
        if self.min_batch_size > self.batch_size:
            msg = f"min_batch_size ({self.min_batch_size}) cannot exceed batch_size ({self.batch_size})"
            raise ValueError(msg)
        return self

    def ranked_backends(self) -> list[BackendSettings]:
        """
        Return the backends in the order they should be tried.

        Backends with an explicit `priority` are ordered by it (lower first);
        ties and unset priorities keep their position in the list.
        """
        indexed = list(enumerate(self.backends))
        indexed.sort(key=lambda pair: (pair[1].priority if pair[1].priority is not None else pair[0], pair[0]))
        return [backend for _, backend in indexed]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RelayConfig":
        """
        Create a RelayConfig from a dictionary.

        Raises:
            ValueError: If the data does not describe a valid configuration.

        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid or missing configuration: {e}"
            raise ValueError(msg) from e


def load_config(config_path: str | Path) -> RelayConfig:
    """
    Load, parse, and validate a YAML configuration file.

    Args:
        config_path: The path to the YAML file.

    Returns:
        A validated RelayConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the file is not valid YAML or not a valid configuration.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise ValueError(msg) from e

    if data is None:
        logger.info("Configuration file %s is empty; using defaults.", path)
        data = {}
    if not isinstance(data, dict):
        msg = "Config file must be a YAML mapping (dictionary)."
        raise ValueError(msg)

    config = RelayConfig.from_dict(data)
    logger.debug("Loaded configuration from %s with %d ranked backend(s).", path, len(config.backends))
    return config
