"""
Configuration Loader

Loads YAML configuration files for runtime settings, the per-field
extraction strategies and the chat reply rules.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Environment overrides applied on top of settings.yaml
_ENV_OVERRIDES = {
    "SALESPAGE_RENDER_JS": ("render_js", "bool"),
    "SALESPAGE_FETCH_TIMEOUT": ("fetch_timeout_seconds", "float"),
    "SALESPAGE_CACHE_TTL_MINUTES": ("cache_ttl_minutes", "float"),
    "SALESPAGE_CACHE_FAILURES": ("cache_failures", "bool"),
}

_TRUTHY = {"1", "true", "yes", "on"}


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_settings(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Load runtime settings, applying SALESPAGE_* environment overrides.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Dictionary with cache_ttl_minutes, fetch_timeout_seconds,
        render_js, cache_failures and user_agent

    Example:
        {
            'cache_ttl_minutes': 30,
            'fetch_timeout_seconds': 30,
            'render_js': False,
            'cache_failures': False,
            ...
        }
    """
    settings = load_config('settings.yaml').get('settings', {})
    if environ is None:
        environ = os.environ

    for var, (key, kind) in _ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        if kind == "bool":
            settings[key] = raw.strip().lower() in _TRUTHY
        else:
            try:
                settings[key] = float(raw)
            except ValueError:
                raise ValueError(f"{var} must be a number, got {raw!r}") from None

    return settings


def load_extraction_config() -> Dict[str, Any]:
    """
    Load the per-field extraction strategy configuration.

    Returns:
        Dictionary mapping field name to its policy definition

    Example:
        {
            'title': {'mode': 'single', 'strategies': [{'selector': 'h1'}, ...]},
            'price': {'mode': 'single', 'strategies': [...], ...},
            ...
        }
    """
    config = load_config('extraction.yaml')
    return config.get('fields', {})


def load_chat_rules() -> List[Dict[str, Any]]:
    """
    Load keyword chat rules in priority order.

    Returns:
        List of rule dicts with name, keywords, reply and generic keys,
        followed by a final rule named 'default' with no keywords
    """
    config = load_config('chat_replies.yaml')
    return config.get('rules', [])
