"""
Utility functions for the dbserver bootstrap
"""
import getpass
import os
import re
from copy import deepcopy
from typing import Any, Dict, Optional

import yaml

from core.errors import ConfigError
from utils.constants import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE


DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "file": None,
        "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
    },
    "platform": {
        "crash_dump_dir": None,
        "exec_backend": None,
    },
    "ps_display": {
        "update_process_title": True,
        "cluster_name": "",
    },
    "messages": {
        "locale_dir": None,
    },
    "roles": {},
}


def load_config(config_path: str = DEFAULT_CONFIG_FILE) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable substitution

    Supports ${VAR_NAME} syntax for environment variables
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config_str = f.read()

    # Replace environment variables
    def replace_env(match):
        var_name = match.group(1)
        value = os.getenv(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} is not set")
        return value

    config_str = re.sub(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}', replace_env, config_str)

    config = yaml.safe_load(config_str)
    return config or {}


def merge_config(base: dict, override: dict) -> dict:
    """Deep-merge *override* onto a copy of *base*."""
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def load_runtime_config(environ=None) -> Dict[str, Any]:
    """Locate, load and default-fill the bootstrap configuration.

    The command line belongs to the selected role, so the file is found via
    ``DBSERVER_CONFIG``. Without it, ``./dbserver.yaml`` is read when present
    and built-in defaults are used otherwise.
    """
    env = os.environ if environ is None else environ
    explicit = str(env.get(CONFIG_ENV_VAR, "")).strip()
    path = explicit or DEFAULT_CONFIG_FILE
    if not explicit and not os.path.exists(path):
        return deepcopy(DEFAULT_CONFIG)

    try:
        loaded = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to load configuration: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path} must contain a YAML object")
    return merge_config(DEFAULT_CONFIG, loaded)


def get_os_username() -> Optional[str]:
    """Return the account name of the effective user, or None if unknown."""
    if hasattr(os, "geteuid"):
        import pwd

        try:
            return pwd.getpwuid(os.geteuid()).pw_name
        except KeyError:
            return None
    try:
        return getpass.getuser()
    except (ImportError, KeyError, OSError):
        return None
