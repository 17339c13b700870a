"""Configuration management for the user directory."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .errors import DirectoryConfigError

ACCEPTANCE_MODES = ("always", "random")


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _section(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise DirectoryConfigError(f"Configuration section '{key}' must be a mapping")
    return value


def _flag(section: Mapping[str, object], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if isinstance(value, str):
        return _env_bool(value, default)
    return bool(value)


def _text(section: Mapping[str, object], key: str, default: str, *, allow_empty: bool = False) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise DirectoryConfigError(f"Configuration value '{key}' must be text")
    if not value and not allow_empty:
        raise DirectoryConfigError(f"Configuration value '{key}' must not be empty")
    return value


@dataclass(frozen=True)
class DirectoryConfig:
    """Behavioural settings for a :class:`~userdir.directory.UserDirectory`."""

    default_name: str = "x"
    default_email: str = "x@x.com"
    default_age: int = 0
    default_password: str = "123"
    acceptance_mode: str = "always"
    acceptance_threshold: float = 0.1
    verify_passwords: bool = False
    token_prefix: str = "token-"
    strict_removal: bool = False
    report_separator: str = "|"

    def __post_init__(self) -> None:
        if self.acceptance_mode not in ACCEPTANCE_MODES:
            raise DirectoryConfigError(
                f"Unknown acceptance mode {self.acceptance_mode!r}; expected one of {', '.join(ACCEPTANCE_MODES)}"
            )
        if not 0.0 <= self.acceptance_threshold <= 1.0:
            raise DirectoryConfigError("Acceptance threshold must be between 0 and 1")
        if self.default_age < 0:
            raise DirectoryConfigError("Default age must not be negative")

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "DirectoryConfig":
        """Create a :class:`DirectoryConfig` from raw dictionary data."""
        defaults = _section(data, "defaults")
        acceptance = _section(data, "acceptance")
        authentication = _section(data, "authentication")
        removal = _section(data, "removal")
        report = _section(data, "report")

        base = DirectoryConfig()
        try:
            default_age = int(defaults.get("age", base.default_age))  # type: ignore[arg-type]
            threshold = float(acceptance.get("threshold", base.acceptance_threshold))  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise DirectoryConfigError(f"Invalid numeric configuration value: {exc}") from exc

        return DirectoryConfig(
            default_name=_text(defaults, "name", base.default_name),
            default_email=_text(defaults, "email", base.default_email),
            default_age=default_age,
            default_password=_text(defaults, "password", base.default_password),
            acceptance_mode=_text(acceptance, "mode", base.acceptance_mode).strip().lower(),
            acceptance_threshold=threshold,
            verify_passwords=_flag(authentication, "verify_passwords", base.verify_passwords),
            token_prefix=_text(authentication, "token_prefix", base.token_prefix, allow_empty=True),
            strict_removal=_flag(removal, "strict", base.strict_removal),
            report_separator=_text(report, "separator", base.report_separator, allow_empty=True),
        )

    def with_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> "DirectoryConfig":
        """Return a copy with ``USERDIR_*`` environment overrides applied."""
        env = os.environ if environ is None else environ
        changes: Dict[str, object] = {}

        mode = env.get("USERDIR_ACCEPTANCE_MODE")
        if mode and mode.strip():
            changes["acceptance_mode"] = mode.strip().lower()
        if "USERDIR_STRICT_REMOVAL" in env:
            changes["strict_removal"] = _env_bool(env.get("USERDIR_STRICT_REMOVAL"), self.strict_removal)
        if "USERDIR_VERIFY_PASSWORDS" in env:
            changes["verify_passwords"] = _env_bool(env.get("USERDIR_VERIFY_PASSWORDS"), self.verify_passwords)

        if not changes:
            return self
        return replace(self, **changes)


def load_directory_config(config_path: Path) -> DirectoryConfig:
    """Load directory settings from a YAML file.

    A missing file yields the default configuration.
    """
    if not config_path.exists():
        return DirectoryConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise DirectoryConfigError(f"Could not parse {config_path}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise DirectoryConfigError("Configuration file must contain a mapping at the top level")

    directory_raw = raw.get("directory", raw)
    if not isinstance(directory_raw, Mapping):
        raise DirectoryConfigError("The 'directory' key must contain a mapping")
    return DirectoryConfig.from_dict(directory_raw)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "userdir.yaml").resolve(strict=False)
    return candidate


__all__ = [
    "ACCEPTANCE_MODES",
    "DirectoryConfig",
    "load_directory_config",
    "resolve_config_path",
]
