"""Path management for wupctl.

This module provides standardized paths for configuration, state and
report storage. On Windows everything lives under %LOCALAPPDATA%\\wupctl;
elsewhere the XDG Base Directory defaults apply.

Defaults:
- Config: ~/.config/wupctl/            (Windows: %LOCALAPPDATA%\\wupctl\\config)
- State: ~/.local/state/wupctl/        (Windows: %LOCALAPPDATA%\\wupctl\\state)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "wupctl"


def _is_windows() -> bool:
    return os.name == "nt"


def _get_app_dir(env_var: str, default_subdir: str, windows_subdir: str) -> Path:
    """Get an application directory respecting environment overrides.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").
        windows_subdir: Subdirectory under %LOCALAPPDATA%\\wupctl on Windows.

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME

    local_appdata = os.environ.get("LOCALAPPDATA")
    if _is_windows() and local_appdata:
        return Path(local_appdata) / APP_NAME / windows_subdir

    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/wupctl/ (or XDG_CONFIG_HOME/wupctl/).
    """
    return _get_app_dir("XDG_CONFIG_HOME", ".config", "config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the update history, reports and log files.

    Returns:
        Path to ~/.local/state/wupctl/ (or XDG_STATE_HOME/wupctl/).
    """
    return _get_app_dir("XDG_STATE_HOME", ".local/state", "state")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to <config dir>/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_reports_dir() -> Path:
    """Get the default report output directory.

    Returns:
        Path to <state dir>/reports/.
    """
    return get_state_dir() / "reports"


def get_log_path() -> Path:
    """Get the default transcript log file path.

    Returns:
        Path to <state dir>/wupctl.log.
    """
    return get_state_dir() / "wupctl.log"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return ensure_dir(get_state_dir(), "state")
