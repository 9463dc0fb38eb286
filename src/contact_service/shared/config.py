import os
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from os import PathLike
from pathlib import Path
from tomllib import TOMLDecodeError, load
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from contact_service.shared.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path(os.environ.get("CONTACT_SERVICE_CONFIG", "config.toml"))

KEY_LENGTH = 32


class General(BaseModel):
    title: str = "contact-service"
    mode: Literal["development", "production"] = "development"


class Database(BaseModel):
    url: str
    max_retries: int = Field(default=5, ge=0)
    retry_interval: float = Field(default=5.0, ge=0)


class Encryption(BaseModel):
    secret: str
    algorithm: str = "aes-256-cbc"
    iv_length: int = Field(default=16, gt=0)

    @field_validator("secret")
    @classmethod
    def check_key_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) != KEY_LENGTH:
            raise ValueError(f"encryption secret must be exactly {KEY_LENGTH} bytes")
        return value

    @field_validator("algorithm")
    @classmethod
    def normalize_algorithm(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def key(self) -> bytes:
        return self.secret.encode("utf-8")


class Pagination(BaseModel):
    default_limit: int = Field(default=10, gt=0)
    default_page: int = Field(default=1, gt=0)


class Logging(BaseModel):
    level: int = INFO

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        if isinstance(value, int):
            return value
        log_levels = {
            "DEBUG": DEBUG,
            "INFO": INFO,
            "WARNING": WARNING,
            "ERROR": ERROR,
            "CRITICAL": CRITICAL,
        }
        return log_levels.get(str(value).upper(), INFO)


class Paths(BaseModel):
    logs: str = "logs"


class Network(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)
    reload: bool = False


class Config(BaseModel):
    general: General = Field(default_factory=General)
    database: Database
    encryption: Encryption
    pagination: Pagination = Field(default_factory=Pagination)
    logging: Logging = Field(default_factory=Logging)
    paths: Paths = Field(default_factory=Paths)
    network: Network = Field(default_factory=Network)

    @property
    def production(self) -> bool:
        return self.general.mode == "production"


def load_config(
    shared_config_file: PathLike = DEFAULT_CONFIG_PATH,
    specific_config_file: PathLike | None = None,
) -> Config:
    """Load and merge configurations from TOML files.

    Raises ConfigurationError when a file is missing or unreadable, or when
    any setting fails validation (including the encryption key length).
    """
    try:
        with Path(shared_config_file).open("rb") as f:
            config_data = load(f)

        if specific_config_file:
            with Path(specific_config_file).open("rb") as f:
                specific_data = load(f)
                config_data.update(specific_data)
    except (OSError, TOMLDecodeError) as e:
        raise ConfigurationError(f"Unable to read configuration: {e}") from e

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
