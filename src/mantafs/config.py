"""
Configuration for mantafs.

Values are chained: explicitly passed values win, then ``MANTA_*``
environment variables, then defaults. Connection parameters (URL, key id,
key path, timeout) are handed to the object-store client untouched; the
filesystem layer itself only reads the home directory, the listing page
size and the default durability.
"""

import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_MANTA_URL = "https://us-east.manta.joyent.com"

# Field name -> environment variable
ENV_VARS: Dict[str, str] = {
    "url": "MANTA_URL",
    "user": "MANTA_USER",
    "key_id": "MANTA_KEY_ID",
    "key_path": "MANTA_KEY_PATH",
    "home_directory": "MANTA_HOME_DIRECTORY",
    "timeout": "MANTA_TIMEOUT",
    "page_size": "MANTA_LIST_PAGE_SIZE",
    "default_durability": "MANTA_DEFAULT_DURABILITY",
}


class MantaConfig(BaseModel):
    """
    Pydantic schema for mantafs configuration.

    Reads missing values from ``MANTA_*`` environment variables.
    """

    url: str = Field(DEFAULT_MANTA_URL, description="Object store endpoint URL")
    user: Optional[str] = Field(None, description="Account name owning the home directory")
    key_id: Optional[str] = Field(None, description="Fingerprint of the signing key (opaque)")
    key_path: Optional[str] = Field(None, description="Path to the private signing key (opaque)")
    home_directory: Optional[str] = Field(
        None, description="Home directory key; defaults to '/<user>'"
    )
    timeout: float = Field(20.0, gt=0, description="Client connection timeout in seconds")
    page_size: int = Field(
        1000, ge=1, le=1000, description="Maximum number of entries per listing page"
    )
    default_durability: int = Field(
        2, ge=1, description="Replication reported for objects without a durability level"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _fill_from_environment(cls, data: Any) -> Any:
        """Fill fields that were not passed explicitly from the environment."""
        if not isinstance(data, dict):
            return data
        merged = dict(data)
        for field_name, env_var in ENV_VARS.items():
            if merged.get(field_name) is not None:
                continue
            value = os.getenv(env_var)
            if value:
                merged[field_name] = value
                logger.debug(f"Read '{field_name}' from env var '{env_var}'.")
        return merged

    @field_validator("home_directory")
    @classmethod
    def _normalize_home(cls, v: Optional[str]) -> Optional[str]:
        """Ensures the home directory is an absolute key without scheme or trailing slash."""
        if v is None:
            return v
        from mantafs.filesystem.paths import strip_scheme

        key = strip_scheme(v.strip())
        if not key.startswith("/"):
            raise ValueError(f"home_directory must be an absolute path, got '{v}'")
        return key.rstrip("/") or "/"

    @model_validator(mode="after")
    def _derive_home(self) -> "MantaConfig":
        """Derives the home directory from the user when not configured."""
        if self.home_directory is None:
            if not self.user:
                raise ValueError(
                    "Either 'home_directory' or 'user' must be configured. "
                    "Set the 'MANTA_USER' environment variable or provide one directly."
                )
            object.__setattr__(self, "home_directory", f"/{self.user.strip('/')}")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "MantaConfig":
        """Build a configuration from the environment, with explicit overrides."""
        return cls(**overrides)

    def connection_parameters(self) -> Dict[str, Any]:
        """Parameters handed to the object-store client."""
        return {
            "url": self.url,
            "user": self.user,
            "key_id": self.key_id,
            "key_path": self.key_path,
            "timeout": self.timeout,
        }
