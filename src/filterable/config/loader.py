from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

from filterable import __version__

DEFAULT_CONFIG_PATH = Path("filterable.config.yaml")

TRANSPORT_DEFAULTS: Dict[str, Any] = {
    "timeout_seconds": 20,
    "user_agent": f"filterable-client/{__version__}",
    "max_workers": 4,
    "headers": {},
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load client configuration from YAML file.

    Args:
        path: Optional path to the config file. Defaults to filterable.config.yaml

    Returns:
        Dictionary with client configuration

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    # Validate structure
    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    if "version" not in config:
        raise ValueError("Config must have 'version' field")

    base_url = config.get("base_url")
    if base_url is not None and not isinstance(base_url, str):
        raise ValueError("Config 'base_url' must be a string")

    transport = config.get("transport")
    if transport is None:
        config["transport"] = {}
    elif not isinstance(transport, dict):
        raise ValueError("Config 'transport' must be a dictionary")

    return config


def get_transport_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Get transport settings with defaults applied.

    Defaults:
    - timeout_seconds: 20
    - user_agent: filterable-client/<version>
    - max_workers: 4
    - headers: {} (extra headers sent with every request)

    Args:
        config: Optional config dict. If None, only defaults are returned.

    Returns:
        Transport settings dictionary
    """
    settings = deepcopy(TRANSPORT_DEFAULTS)
    if config:
        settings.update(config.get("transport") or {})

    if not isinstance(settings["timeout_seconds"], (int, float)) or settings["timeout_seconds"] <= 0:
        raise ValueError("Transport 'timeout_seconds' must be a positive number")
    if not isinstance(settings["max_workers"], int) or settings["max_workers"] < 1:
        raise ValueError("Transport 'max_workers' must be a positive integer")
    if not isinstance(settings["headers"], dict):
        raise ValueError("Transport 'headers' must be a dictionary")

    return settings


def join_url(base_url: str | None, resource: str) -> str:
    """Resolve a resource path against the configured base URL."""
    if not base_url or resource.startswith(("http://", "https://")):
        return resource
    return f"{base_url.rstrip('/')}/{resource.lstrip('/')}"
