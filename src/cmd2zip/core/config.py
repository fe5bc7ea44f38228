# cmd2zip/src/cmd2zip/core/config.py

import os
import re
from pathlib import Path
from typing import Optional, Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from cmd2zip.core.errors import ConfigurationError

STDIN_PLACEHOLDER = "-"


class Settings(BaseSettings):
    """Defaults read from ``CMD2ZIP_*`` environment variables or a ``.env`` file."""

    output: Path = Field(default=Path("output.zip"))
    threads: int = Field(default=0, ge=0)
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CMD2ZIP_",
        "extra": "ignore"
    }


def get_settings() -> Settings:
    return Settings()


class RunConfig(BaseModel):
    """
    Immutable snapshot of the resolved options for one run.

    Built once before dispatch and shared read-only by every worker.
    """

    output: Path = Field(default=Path("output.zip"), description="Zip archive to write to.")
    append: bool = Field(default=False, description="Add entries to an existing archive instead of replacing it.")
    input: Optional[Path] = Field(default=None, description="File to read extra commands from; '-' for stdin.")
    cmd_prefix: str = Field(default="", description="Text prepended to every command; not used for naming.")
    cmd_postfix: str = Field(default="", description="Text appended to every command; not used for naming.")
    name_pattern: Optional[str] = Field(default=None, description="Regex extracting an entry name from a command.")
    name_replace: Optional[str] = Field(default=None, description="Expansion template applied to the pattern's captures.")
    name_prefix: Optional[str] = Field(default=None, description="Text prepended to every generated name.")
    name_postfix: Optional[str] = Field(default=None, description="Text appended to every generated name.")
    threads: int = Field(default=0, ge=0, description="Worker count; 0 uses every available core.")
    limit: Optional[int] = Field(default=None, ge=0, description="Maximum number of commands to run.")
    dry_run: bool = Field(default=False, description="Archive the assembled commands instead of running them.")

    model_config = {
        "frozen": True,
        "extra": "forbid"
    }

    @field_validator("name_pattern")
    @classmethod
    def _pattern_compiles(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"invalid regex {value!r}: {e}") from e
        return value

    @model_validator(mode="after")
    def _replacement_requires_pattern(self) -> "RunConfig":
        if self.name_replace is not None and self.name_pattern is None:
            raise ValueError("cannot specify a name replacement without a name pattern")
        return self

    @property
    def reads_stdin(self) -> bool:
        return self.input is not None and str(self.input) == STDIN_PLACEHOLDER


def build_run_config(**options: Any) -> RunConfig:
    """
    Validate raw options into a RunConfig.

    Options that are ``None`` fall back to the model defaults, so callers can
    pass CLI values through untouched.

    Raises:
        ConfigurationError: If any option is invalid or the input file is unreadable
    """
    values = {key: value for key, value in options.items() if value is not None}
    try:
        config = RunConfig(**values)
    except ValidationError as e:
        messages = "; ".join(_format_error(err) for err in e.errors())
        raise ConfigurationError(messages) from e

    if config.input is not None and not config.reads_stdin:
        if not config.input.is_file():
            raise ConfigurationError(f"Input file not found: {config.input}")
        if not os.access(config.input, os.R_OK):
            raise ConfigurationError(f"Input file is not readable: {config.input}")

    return config


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    # Drop pydantic's "Value error, " lead-in
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}" if location else message


def resolve_thread_count(threads: int) -> int:
    """Return the worker count to use; ``0`` means every available core."""
    if threads < 0:
        raise ConfigurationError(f"Thread count must be >= 0, got {threads}")
    if threads == 0:
        return os.cpu_count() or 1
    return threads
