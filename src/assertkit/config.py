from __future__ import annotations

from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from assertkit.errors import ConfigError

DEFAULT_CONFIG_NAME = "assertkit.yaml"


class AssertKitConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report: str | None = None
    debug_log: str | None = None
    verbose: bool = False
    max_message_length: int = 2000

    @field_validator("report", "debug_log", mode="before")
    @classmethod
    def expand_env(cls, v: str | None) -> str | None:
        """Expand ``${VAR}`` and ``${VAR:-default}`` references in paths.

        Raises ValueError naming the variable when it is unset and has no
        default, rather than writing to a literal ``${VAR}`` path.
        """
        if v is None:
            return None
        try:
            return expandvars(str(v), nounset=True)
        except Exception as e:
            raise ValueError(f"cannot expand '{v}': {e}") from e

    @field_validator("max_message_length")
    @classmethod
    def message_length_must_fit_a_line(cls, v: int) -> int:
        if v < 80:
            raise ValueError("max_message_length must be at least 80")
        return v

    def merged(self, **overrides: object) -> AssertKitConfig:
        """Return a copy with every non-None override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return self.model_copy(update=updates)


def load_config(path: Path) -> AssertKitConfig:
    """Load and validate an assertkit config from a YAML file."""
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")

    config_dir = path.parent.resolve()

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(raw).__name__}")

    try:
        config = AssertKitConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}:\n{e}") from e

    # Resolve relative output paths relative to config file location
    for field in ("report", "debug_log"):
        value = getattr(config, field)
        if value and not Path(value).is_absolute():
            setattr(config, field, str((config_dir / value).resolve()))

    return config
