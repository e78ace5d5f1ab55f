"""Configuration management for bih-payroll.

Configuration lives in one file:

settings.json - Machine-specific settings
   - rules_file: path to a tax rules YAML (overrides the bundled table)
   - directory_file: path to the tenants/employees/contracts YAML
   - default_tax_factor: tax factor used by the CLI when none is given

Config directory resolution:
1. BIH_PAYROLL_CONFIG_PATH environment variable (if set)
2. ~/.config/bih-payroll/ (XDG_CONFIG_HOME fallback)

Rules file resolution:
1. Explicit path passed by the caller
2. BIH_PAYROLL_RULES_FILE environment variable
3. settings.json "rules_file" key
4. Bundled bihpayroll/data/tax_rules.yaml

Data paths follow XDG spec:
- Data: XDG_DATA_HOME/bih-payroll/ or ~/.local/share/bih-payroll/
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "bih-payroll"
SETTINGS_FILENAME = "settings.json"
BUNDLED_RULES_FILE = Path(__file__).parent.parent / "data" / "tax_rules.yaml"

# Keys accepted by 'settings set'
KNOWN_SETTINGS = ("rules_file", "directory_file", "default_tax_factor")


class ConfigNotFoundError(Exception):
    """Raised when a required configuration entry is missing."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. BIH_PAYROLL_CONFIG_PATH environment variable
    2. ~/.config/bih-payroll/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("BIH_PAYROLL_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Raises:
        ValueError: If key is not a known setting
    """
    if key not in KNOWN_SETTINGS:
        raise ValueError(f"Unknown setting '{key}'. Must be one of {KNOWN_SETTINGS}")
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_rules_path(path: Optional[Path] = None) -> Path:
    """Resolve the tax rules YAML path (see module docstring for order)."""
    if path:
        return Path(path)

    env_path = os.environ.get("BIH_PAYROLL_RULES_FILE")
    if env_path:
        return Path(env_path)

    configured = get_setting("rules_file")
    if configured:
        return Path(configured).expanduser()

    return BUNDLED_RULES_FILE


def get_directory_path(path: Optional[Path] = None) -> Path:
    """Resolve the employee directory YAML path.

    Raises:
        ConfigNotFoundError: If no path is given and none is configured
    """
    if path:
        return Path(path)

    configured = get_setting("directory_file")
    if configured:
        return Path(configured).expanduser()

    raise ConfigNotFoundError(
        "No employee directory configured.\n\n"
        "Pass --directory /path/to/directory.yaml or run:\n"
        "  bih-payroll settings set directory_file /path/to/directory.yaml"
    )


def get_default_tax_factor() -> int:
    """Tax factor used when the caller gives none (100 = 1.0)."""
    return int(get_setting("default_tax_factor", 100))


def get_data_path() -> Path:
    """Get the data directory path (XDG_DATA_HOME/bih-payroll/).

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path
