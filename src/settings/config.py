from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codebuffer.render import DEFAULT_THEME, RenderOptions
from scan.files import SESSION_PATH

CONFIG_FILENAME = "srclens.toml"


class SrcLensConfig(BaseModel):
    """Configuration for srclens display commands."""

    model_config = ConfigDict(extra="forbid")

    color: bool = Field(
        default=True,
        description="Syntax-color code when writing to a terminal",
    )
    flood: bool = Field(
        default=False,
        description="Never page output, even when longer than one screen",
    )
    theme: str = Field(
        default=DEFAULT_THEME,
        description="Pygments style name used for coloring",
    )
    line_numbers: bool = Field(
        default=False,
        description="Show line numbers unless a command says otherwise",
    )
    session_path: str = Field(
        default=SESSION_PATH,
        description="Synthetic filename of code entered in the current session",
    )
    code_kinds: dict[str, str] = Field(
        default_factory=dict,
        description="Extra extension/basename -> code kind mappings",
    )

    @field_validator("code_kinds", mode="before")
    @classmethod
    def validate_code_kinds(cls, v: Any) -> Any:
        """Validate that code kind keys look like extensions or basenames.

        Note: this runs in `mode="before"` so we can report a clear error
        message using the raw TOML values.
        """

        if v is None:
            return {}

        if not isinstance(v, dict):
            msg = "code_kinds must be a mapping of extension -> kind"
            raise TypeError(msg)

        for key, kind in v.items():
            if not isinstance(key, str) or not isinstance(kind, str):
                msg = "code_kinds must be a mapping of str -> str"
                raise TypeError(msg)
            if not key or "/" in key:
                msg = f"Invalid code_kinds key {key!r}: expected '.ext' or a basename"
                raise ValueError(msg)
            if not kind.strip():
                msg = f"Empty code kind for {key!r}"
                raise ValueError(msg)

        return v

    def render_options(self, *, color: bool | None = None) -> RenderOptions:
        """Build explicit render options, optionally overriding color."""
        return RenderOptions(
            color=self.color if color is None else color,
            theme=self.theme,
        )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> SrcLensConfig:
    """Load configuration from srclens.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return SrcLensConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return SrcLensConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
