"""
Configuration management for bpgen.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for a generation run.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()


class Config(BaseModel):
    """Root configuration for bpgen."""

    project_name: str = Field(
        default="app", min_length=1, description="Prefix for vendored module names"
    )
    target_sdk: int = Field(default=34, ge=1, description="Target platform SDK version")
    project_dir: Path = Field(default=Path("."), description="Directory holding Android.bp")
    libs_dir: Path | None = Field(
        default=None, description="Vendored libs directory (defaults to <project_dir>/libs)"
    )
    android_bp: Path | None = Field(
        default=None, description="Hand-maintained Android.bp (defaults to <project_dir>/Android.bp)"
    )
    platform_modules: list[str] = Field(
        default_factory=list,
        description="group:name glob patterns of modules provided by the platform",
    )
    name_overrides_file: Path | None = Field(
        default=None, description="JSON file with extra group:name -> module name entries"
    )
    patch_android_bp: bool = Field(default=True, description="Patch the hand-maintained Android.bp")
    copyright_holders: list[str] = Field(
        default_factory=lambda: ["The LineageOS Project"],
        description="Copyright holders written in the generated header",
    )
    license_id: str = Field(default="Apache-2.0", description="SPDX license of generated files")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )

    model_config = {"extra": "ignore"}

    @property
    def libs_path(self) -> Path:
        """Resolved vendored libs directory."""
        return self.libs_dir if self.libs_dir is not None else self.project_dir / "libs"

    @property
    def android_bp_path(self) -> Path:
        """Resolved hand-maintained Android.bp path."""
        return self.android_bp if self.android_bp is not None else self.project_dir / "Android.bp"

    @classmethod
    def load(cls, data: Mapping[str, Any]) -> Config:
        """Validate raw settings.

        Args:
            data: Field values, as strings or native types.

        Returns:
            Config: The validated configuration.

        Raises:
            ValidationError: If any value is rejected.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(
                message=f"Invalid configuration: {first['msg']}",
                field_name=field_name,
                cause=e,
            ) from e

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables.

        Raises:
            ValidationError: If a variable holds an invalid value.
        """
        platform_modules = [
            pattern.strip()
            for pattern in os.environ.get("BPGEN_PLATFORM_MODULES", "").split(",")
            if pattern.strip()
        ]
        name_overrides = os.environ.get("BPGEN_NAME_OVERRIDES")
        return cls.load({
            "project_name": os.environ.get("BPGEN_PROJECT_NAME", "app"),
            "target_sdk": os.environ.get("BPGEN_TARGET_SDK", "34"),
            "project_dir": os.environ.get("BPGEN_PROJECT_DIR", "."),
            "platform_modules": platform_modules,
            "name_overrides_file": name_overrides or None,
            "log_level": os.environ.get("BPGEN_LOG_LEVEL", "INFO"),
        })


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
