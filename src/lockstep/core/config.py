"""Global configuration for Lockstep.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LockstepConfig(BaseSettings):
    """Lockstep configuration settings.

    Values can be overridden via environment variables with LOCKSTEP_ prefix.
    Example: LOCKSTEP_XML_PATH=/usr/share/dbus-1/interfaces overrides xml_path.
    """

    # Document discovery
    xml_path: Path | None = Field(
        default=None,
        description="XML directory override; takes precedence over explicit paths",
    )
    default_xml_dirs: list[str] = Field(
        default_factory=lambda: ["xml", "XML"],
        description="Conventional XML directories, relative to the base directory",
    )
    xml_suffix: str = Field(
        default=".xml",
        description="File suffix of introspection documents",
    )

    # Resolution
    match_strategy: Literal["substring", "exact"] = Field(
        default="substring",
        description="How a record type name is matched when no member hint is given",
    )
    max_candidates_reported: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of candidates listed in an ambiguity error",
    )

    model_config = {
        "env_prefix": "LOCKSTEP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> LockstepConfig:
    """Get cached configuration instance.

    Returns:
        LockstepConfig singleton instance.
    """
    return LockstepConfig()


def reload_config() -> LockstepConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh LockstepConfig instance.
    """
    get_config.cache_clear()
    return get_config()
