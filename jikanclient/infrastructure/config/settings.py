"""Provides functions for loading client configuration.

Supports loading from a YAML configuration file, a .env file and
``JIKAN_*`` environment variables, and turns the result into a
``ClientSettings`` the Client can be built from.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_FILE = Path.home() / ".jikanclient" / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "JIKAN_"

CACHE_BACKENDS = ("none", "memory", "disk")


@dataclass
class ClientSettings:
    """Everything needed to build a Client."""
    base_url: str = "https://api.jikan.moe/v4"
    timeout: float = 30.0
    max_retries: int = 0
    rate_limit: int = 0  # requests/second; 0 disables limiting
    cache_backend: str = "none"
    cache_ttl: float = 300.0
    cache_dir: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self):
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(f"cache_backend must be one of {CACHE_BACKENDS}, got {self.cache_backend!r}")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")


def _coerce(value: Any, target: Any) -> Any:
    """Converts a raw (usually string) config value to the field's type."""
    if value is None:
        return None
    if target in (int, "int"):
        return int(value)
    if target in (float, "float"):
        return float(value)
    return str(value)


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _load_yaml(config_file: Path) -> Dict[str, Any]:
    if not config_file.exists():
        logger.debug(f"YAML config file not found: {config_file}")
        return {}
    with open(config_file, "r", encoding="utf-8") as f:
        yaml_config = yaml.safe_load(f)
    if yaml_config is None:
        return {}
    if not isinstance(yaml_config, dict):
        raise ValueError(f"YAML config file {config_file} did not contain a mapping")
    logger.info(f"Loaded configuration from YAML: {config_file}")
    # Accept both top-level keys and a nested "jikan:" section
    section = yaml_config.get("jikan", yaml_config)
    return section if isinstance(section, dict) else {}


def load_settings(
    config_file: Optional[Path] = DEFAULT_CONFIG_FILE,
    env_file: Optional[Path] = None,
) -> ClientSettings:
    """Loads client settings.

    Priority order (highest to lowest):
    1. Environment Variables (``JIKAN_MAX_RETRIES`` etc.)
    2. .env file
    3. YAML configuration file
    4. ClientSettings defaults

    Args:
        config_file: Path to the YAML configuration file (None to skip).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    raw: Dict[str, Any] = {}

    # 1. YAML file (Lowest priority)
    if config_file is not None:
        raw.update(_load_yaml(Path(config_file)))

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path and load_dotenv(dotenv_path=dotenv_path, override=False):
        logger.info(f"Loaded environment variables from: {dotenv_path}")

    # 3. Environment variables (Highest priority)
    for f in fields(ClientSettings):
        env_key = ENV_PREFIX + f.name.upper()
        if env_key in os.environ:
            raw[f.name] = os.environ[env_key]

    known = {f.name: f.type for f in fields(ClientSettings)}
    unknown = set(raw) - set(known)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

    values = {}
    for name, value in raw.items():
        if name not in known:
            continue
        target = known[name]
        try:
            values[name] = _coerce(value, target)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value for {name}: {value!r}") from e

    settings = ClientSettings(**values)
    logger.debug(f"Resolved client settings: {settings}")
    return settings
