"""Configuration file management for cofre."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from cofre.domain.billing import DEFAULT_HORIZON_OCCURRENCES
from cofre.domain.report import DEFAULT_DASHBOARD_MONTHS, DEFAULT_FORECAST_MONTHS, DEFAULT_FORECAST_STEPS

DEFAULT_CURRENCY = "R$"


@dataclass(frozen=True)
class Settings:
    """Immutable settings merged from the config file over defaults."""

    currency: str = DEFAULT_CURRENCY
    pix_key: str = ""
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES
    forecast_months: int = DEFAULT_FORECAST_MONTHS
    forecast_steps: int = DEFAULT_FORECAST_STEPS
    dashboard_months: int = DEFAULT_DASHBOARD_MONTHS


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "cofre" / "config.toml"


def default_config() -> dict[str, Any]:
    """Config document written by 'cofre init'."""
    defaults = Settings()
    return {
        "currency": defaults.currency,
        "pix_key": defaults.pix_key,
        "projection": {
            "horizon_occurrences": defaults.horizon_occurrences,
        },
        "reports": {
            "forecast_months": defaults.forecast_months,
            "forecast_steps": defaults.forecast_steps,
            "dashboard_months": defaults.dashboard_months,
        },
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config(), f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Merge a config document over the default settings.

    Args:
        config: Parsed config document (possibly partial).

    Returns:
        Settings. Missing or invalid values fall back to defaults.
    """
    defaults = Settings()
    projection = config.get("projection", {})
    reports = config.get("reports", {})
    if not isinstance(projection, dict):
        projection = {}
    if not isinstance(reports, dict):
        reports = {}

    currency = config.get("currency")
    pix_key = config.get("pix_key")

    return Settings(
        currency=currency if isinstance(currency, str) and currency else defaults.currency,
        pix_key=pix_key if isinstance(pix_key, str) else defaults.pix_key,
        horizon_occurrences=_positive_int(projection.get("horizon_occurrences"), defaults.horizon_occurrences),
        forecast_months=_positive_int(reports.get("forecast_months"), defaults.forecast_months),
        forecast_steps=_positive_int(reports.get("forecast_steps"), defaults.forecast_steps),
        dashboard_months=_positive_int(reports.get("dashboard_months"), defaults.dashboard_months),
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, using defaults when the config file is missing.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings merged over defaults.

    Raises:
        tomllib.TOMLDecodeError: If the config file is not valid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()
    return settings_from_config(config)


def set_value(key: str, value: Any, config_path: Path | None = None) -> None:
    """Set a top-level or dotted ('reports.forecast_months') config value.

    Args:
        key: Config key, dotted for nested tables.
        value: Value to store.
        config_path: Path to config file. If None, uses default location.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = default_config()

    *tables, leaf = key.split(".")
    target = config
    for table in tables:
        target = target.setdefault(table, {})
    target[leaf] = value

    save_config(config, config_path)
