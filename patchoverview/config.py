"""
Run configuration for Patch Overview.

Values come from the environment and can be overridden from the command line.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .core.errors import ConfigError

ENV_PREFIX = "PATCH_OVERVIEW_"
DEFAULT_DOWNLOAD_TIMEOUT = 30


class Settings(BaseModel):
    """Settings shared by the scanner and the CLI."""
    root: Path = Field(default_factory=Path.cwd, description="Drupal root; composer files live one level up")
    include_dev: bool = Field(default=True, description="Also read packages-dev from the lock file")
    download_timeout: int = Field(default=DEFAULT_DOWNLOAD_TIMEOUT, ge=1, description="Seconds to wait for a remote patch")
    http_user: Optional[str] = Field(default=None, description="Basic-auth user for remote patches")
    http_password: Optional[str] = Field(default=None, description="Basic-auth password for remote patches")

    @property
    def project_dir(self) -> Path:
        """Directory holding composer.json and composer.lock."""
        return Path(os.path.abspath(self.root / ".."))

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from PATCH_OVERVIEW_* variables, then apply non-None overrides.

        Invalid values raise ConfigError.
        """
        values = {}

        if os.getenv(f"{ENV_PREFIX}ROOT"):
            values["root"] = Path(os.getenv(f"{ENV_PREFIX}ROOT"))
        if os.getenv(f"{ENV_PREFIX}DOWNLOAD_TIMEOUT"):
            timeout = os.getenv(f"{ENV_PREFIX}DOWNLOAD_TIMEOUT")
            try:
                values["download_timeout"] = int(timeout)
            except ValueError as e:
                raise ConfigError(f"{ENV_PREFIX}DOWNLOAD_TIMEOUT must be a whole number of seconds, got '{timeout}'") from e
        if os.getenv(f"{ENV_PREFIX}HTTP_USER"):
            values["http_user"] = os.getenv(f"{ENV_PREFIX}HTTP_USER")
        if os.getenv(f"{ENV_PREFIX}HTTP_PASSWORD"):
            values["http_password"] = os.getenv(f"{ENV_PREFIX}HTTP_PASSWORD")

        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in e.errors())
            raise ConfigError(f"Invalid settings: {problems}") from e
