"""Configuration file support for codeaudit (.codeaudit.yml)."""

from dataclasses import dataclass
from pathlib import Path

import yaml

from codeaudit.models import Severity

DEFAULT_CONFIG_NAME = ".codeaudit.yml"


@dataclass
class Config:
    """codeaudit configuration loaded from .codeaudit.yml."""

    severity_threshold: str = "LOW"
    language: str = "Kotlin"
    max_input_chars: int = 500_000
    compliance: bool = True
    fail_under: int | None = None

    @property
    def min_severity(self) -> Severity:
        return Severity(self.severity_threshold)


def load_config(config_path: str | None = None, project_root: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Priority: explicit --config path > .codeaudit.yml in project root > defaults.
    """
    path = None

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    elif project_root:
        candidate = Path(project_root) / DEFAULT_CONFIG_NAME
        if candidate.exists():
            path = candidate

    if path is None:
        return Config()

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must be a YAML mapping, got {type(raw).__name__}")

    return _parse_config(raw)


def _parse_config(raw: dict) -> Config:
    """Parse and validate raw YAML dict into a Config object."""
    config = Config()

    if "severity_threshold" in raw:
        sev = raw["severity_threshold"]
        valid = {s.value for s in Severity}
        if sev not in valid:
            raise ValueError(f"severity_threshold must be one of {sorted(valid)}, got '{sev}'")
        config.severity_threshold = sev

    if "language" in raw:
        language = raw["language"]
        if not isinstance(language, str) or not language.strip():
            raise ValueError("language must be a non-empty string")
        config.language = language

    if "max_input_chars" in raw:
        val = raw["max_input_chars"]
        if not isinstance(val, int) or isinstance(val, bool) or val <= 0:
            raise ValueError("max_input_chars must be a positive integer")
        config.max_input_chars = val

    if "compliance" in raw:
        val = raw["compliance"]
        if not isinstance(val, bool):
            raise ValueError("compliance must be true or false")
        config.compliance = val

    if "fail_under" in raw:
        val = raw["fail_under"]
        if val is not None and (not isinstance(val, int) or isinstance(val, bool) or not 0 <= val <= 100):
            raise ValueError("fail_under must be an integer between 0 and 100")
        config.fail_under = val

    return config
