"""Runtime configuration for the collator.

Every setting has a default that reproduces the stock behaviour
(facebook/jest, r2c.json in the working directory), so running with no
config file is the normal case. A YAML file can override any of them:

    tags_url: https://api.github.com/repos/facebook/jest/tags
    output_path: out/r2c.json
    parser:
      flush_trailing_comment: true
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from r2c.errors import ConfigError

DEFAULT_TAGS_URL = "https://api.github.com/repos/facebook/jest/tags"
DEFAULT_CHANGELOG_URL = (
    "https://raw.githubusercontent.com/facebook/jest/master/CHANGELOG.md"
)
DEFAULT_OUTPUT_PATH = "r2c.json"


class ParserOptions(BaseModel):
    """Switches for the changelog parser's known quirks.

    All switches default to off.

    Attributes:
        flush_trailing_comment: Flush the block still buffered at end of input
        reset_after_flush: Clear the buffer after every flush, so a later
                           boundary line cannot emit the same block again
        fan_out_versions: Attach blocks under a heading that names several
                          versions to every one of them, not just the first
    """

    flush_trailing_comment: bool = False
    reset_after_flush: bool = False
    fan_out_versions: bool = False


class R2CConfig(BaseModel):
    """Top-level configuration, loaded from YAML or built from defaults."""

    tags_url: str = Field(DEFAULT_TAGS_URL, description="Tags API endpoint")
    changelog_url: str = Field(
        DEFAULT_CHANGELOG_URL, description="Raw changelog endpoint"
    )
    output_path: str = Field(DEFAULT_OUTPUT_PATH, description="Output JSON file")
    timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")
    github_token: str | None = Field(
        None, description="GitHub token; GITHUB_TOKEN is used when unset"
    )
    parser: ParserOptions = Field(default_factory=ParserOptions)

    def resolved_token(self) -> str:
        """Return the configured token, falling back to the environment."""
        return self.github_token or os.environ.get("GITHUB_TOKEN", "")


def load_config(path: str | Path | None = None) -> R2CConfig:
    """Load and validate a YAML config file.

    Args:
        path: Path to the YAML file. None means "use defaults".

    Returns:
        A validated R2CConfig. Returns defaults if the file doesn't exist.

    Raises:
        ConfigError: If the YAML content is invalid or fails validation.
    """
    if path is None:
        return R2CConfig()

    config_path = Path(path)
    if not config_path.exists():
        return R2CConfig()

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")

    try:
        return R2CConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc
