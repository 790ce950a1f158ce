"""MIME configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars,
the same way the connector services are configured.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class StorageConfig(BaseSettings):
    """Where body content is kept while a message is in memory."""

    model_config = {"env_prefix": "MIME_STORAGE_"}

    backend: Literal["memory", "tempfile", "threshold"] = Field(
        default="threshold",
        description="memory, tempfile, or threshold (memory until threshold_bytes, then tempfile)",
    )
    threshold_bytes: int = Field(
        default=2048,
        ge=0,
        description="Bodies larger than this spill to temporary files (threshold backend)",
    )
    temp_dir: str | None = Field(
        default=None,
        description="Directory for temporary body files (system default if unset)",
    )
    temp_prefix: str = Field(
        default="umbrella-mime-",
        description="File name prefix for temporary body files",
    )


class ParserConfig(BaseSettings):
    """Tokenizer and builder limits."""

    model_config = {"env_prefix": "MIME_PARSER_"}

    strict: bool = Field(
        default=False,
        description="Raise on malformed input instead of logging and continuing",
    )
    max_header_count: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of header fields per entity",
    )
    max_content_length: int | None = Field(
        default=None,
        ge=0,
        description="Maximum size of a raw message in bytes (unlimited if unset)",
    )
    max_nesting_depth: int = Field(
        default=100,
        ge=1,
        description="Maximum depth of nested messages and multiparts",
    )


class MimeConfig(BaseSettings):
    """Root configuration.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "MIME_"}

    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON log lines instead of console output")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
