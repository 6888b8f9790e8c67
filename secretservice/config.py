"""
SecretService Configuration — validated client settings.

Reads overrides from environment variables:
    SECRETSERVICE_ALGORITHM = plain | dh-ietf1024-sha256-aes128-cbc-pkcs7
    SECRETSERVICE_PROMPT_TIMEOUT = <seconds>
    SECRETSERVICE_WINDOW_ID = <opaque string passed to prompts>
    SECRETSERVICE_BUS = SESSION | SYSTEM
    SECRETSERVICE_COLLECTION = <collection object path>
"""
import os
import logging

from pydantic import BaseModel, Field, field_validator

from .conf import ALGORITHM_DH, ALGORITHMS, DEFAULT_COLLECTION, PROMPT_TIMEOUT

logger = logging.getLogger("secretservice")

_ENV_FIELDS = {
    "SECRETSERVICE_ALGORITHM": "algorithm",
    "SECRETSERVICE_PROMPT_TIMEOUT": "prompt_timeout",
    "SECRETSERVICE_WINDOW_ID": "window_id",
    "SECRETSERVICE_BUS": "bus",
    "SECRETSERVICE_COLLECTION": "collection",
}


class SecretServiceConfig(BaseModel):
    """Validated client configuration."""

    algorithm: str = Field(default=ALGORITHM_DH)
    prompt_timeout: float = Field(default=PROMPT_TIMEOUT, gt=0)
    window_id: str = Field(default="")
    bus: str = Field(default="SESSION")
    collection: str = Field(default=DEFAULT_COLLECTION)

    model_config = {"frozen": True}

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Only the two algorithms defined by the API are accepted."""
        if v not in ALGORITHMS:
            raise ValueError(f"Unsupported session algorithm: {v}")
        return v

    @field_validator("bus")
    @classmethod
    def validate_bus(cls, v: str) -> str:
        v = v.upper()
        if v not in ("SESSION", "SYSTEM"):
            raise ValueError(f"Unsupported message bus: {v}")
        return v

    @field_validator("collection")
    @classmethod
    def validate_collection(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Collection must be an object path: {v}")
        return v

    @classmethod
    def from_env(cls) -> "SecretServiceConfig":
        """Create SecretServiceConfig from environment variables.

        Unset variables keep their defaults.

        Returns:
            Populated SecretServiceConfig instance.
        """
        values = {
            field: os.environ[name]
            for name, field in _ENV_FIELDS.items()
            if name in os.environ
        }
        logger.debug("Configuration overrides from environment: %s", sorted(values))
        return cls(**values)
