"""Global configuration for modsynth.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class ModsynthConfig(BaseSettings):
    """modsynth configuration settings.

    Values can be overridden via environment variables with MODSYNTH_ prefix.
    Example: MODSYNTH_TYPE_NAME_SUFFIX=Mod overrides type_name_suffix.
    """

    # Generated names
    opaque_reference_type: str = Field(
        default="ViewReference",
        description="Type substituted for closures that produce views",
    )
    erased_name_prefix: str = Field(
        default="Any",
        description="Marker prefixed to constraints with no table entry",
    )
    reserved_prefix_word: str = Field(
        default="underscore",
        description="Word replacing a leading underscore in variant names",
    )
    type_name_suffix: str = Field(
        default="Modifier",
        description="Suffix appended to the capitalized operation name",
    )
    parse_error_type: str = Field(
        default="ModifierParseError",
        description="Name of the generated failure type",
    )
    receiver_name: str = Field(
        default="content",
        description="Name of the receiver in the generated body",
    )

    # Discovery
    skip_underscore_prefixed: bool = Field(
        default=True,
        description="Skip operations whose names start with an underscore",
    )
    interface_suffix: str = Field(
        default=".swiftinterface",
        description="File suffix scanned when the input is a directory",
    )

    # Execution
    max_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Worker threads used to generate groups concurrently",
    )
    preview_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum rows shown in CLI previews",
    )
    output_directory: str = Field(
        default="./Generated",
        description="Default directory for generated files",
    )

    model_config = {
        "env_prefix": "MODSYNTH_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> ModsynthConfig:
    """Get cached configuration instance.

    Returns:
        ModsynthConfig singleton instance.
    """
    return ModsynthConfig()


def reload_config() -> ModsynthConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh ModsynthConfig instance.
    """
    get_config.cache_clear()
    return get_config()
