import logging
from pathlib import Path
from typing import Optional

import dotenv
from pydantic import BaseModel, Field, field_validator


class SmtConfig(BaseModel):
    """Configuration for the sparse Merkle tree.

    This model loads configuration from environment variables and defaults.
    """
    # Hashing Configuration
    hash_personalization: str = Field(
        default="ckb-default-hash",
        description="BLAKE2b personalization string used for every leaf and branch hash"
    )

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Level applied to the ckb_smt logger by configure_logging"
    )

    @field_validator('hash_personalization')
    def validate_personalization(cls, value):
        """Validate personalization is 1-16 ASCII characters."""
        if not value.isascii():
            raise ValueError("Hash personalization must be ASCII")
        if not 0 < len(value) <= 16:
            raise ValueError("Hash personalization must be between 1 and 16 bytes")
        return value

    @field_validator('log_level')
    def validate_log_level(cls, value):
        """Validate log level is a name known to the logging module."""
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    model_config = {
        "validate_assignment": True,
    }


# Global config instance with default values
config = SmtConfig()


def load_config_from_env(env_file: Optional[Path] = None) -> SmtConfig:
    """Load configuration from environment variables.

    Args:
        env_file: Optional .env file loaded before reading the environment

    Returns:
        SmtConfig: Configuration instance with values from environment
    """
    import os

    if env_file is not None:
        dotenv.load_dotenv(env_file)

    env_settings = {}

    env_mappings = {
        "SMT_HASH_PERSONALIZATION": "hash_personalization",
        "SMT_LOG_LEVEL": "log_level",
    }

    for env_var, field_name in env_mappings.items():
        if env_var in os.environ:
            env_settings[field_name] = os.environ[env_var]

    return SmtConfig(**env_settings)


def configure_logging(settings: Optional[SmtConfig] = None) -> logging.Logger:
    """Apply the configured log level to the package logger.

    No handlers are installed; the host application owns those.
    """
    settings = settings or config
    logger = logging.getLogger("ckb_smt")
    logger.setLevel(settings.log_level)
    return logger
