import copy
import os
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

CONFIG_ENV_VAR = "SCHEMAORG_VALIDATOR_CONFIG"
ENV_PREFIX = "SCHEMAORG_VALIDATOR_"

DEFAULTS: Dict[str, Any] = {
    "ontology": {
        "schema_url": "https://schema.org/version/latest/schemaorg-current-https.jsonld",
        "schema_path": "data/ontology/schemaorg-current-https.jsonld",
        "type_map_path": "data/typeMap.json",
        "subclass_map_path": "data/subclassMap.json",
        "auto_build": True,
        "download_timeout": 30,
    },
    "validation": {
        "unknown_type_policy": "strip",
    },
    "server": {
        "host": "localhost",
        "port": 8010,
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
    },
}


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Return base updated with overlay; nested sections merge, everything else is replaced."""
    out = copy.deepcopy(dict(base))
    for key, value in (overlay or {}).items():
        if isinstance(value, Mapping) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _scalar_settings(config: Mapping[str, Any]) -> Iterator[Tuple[str, str, Any]]:
    for section, values in config.items():
        if not isinstance(values, Mapping):
            continue
        for key, value in values.items():
            if not isinstance(value, (dict, list)):
                yield section, key, value


def env_name(section: str, key: str) -> str:
    """Environment variable overriding one setting, e.g. SCHEMAORG_VALIDATOR_SERVER_PORT."""
    return f"{ENV_PREFIX}{section}_{key}".upper()


def _parse_env_value(raw: str, current: Any) -> Any:
    # Strings stay verbatim so paths like "001" or "off" are not reinterpreted
    if isinstance(current, str):
        return raw
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


class ConfigManager:
    """
    Layered project configuration.

    Built-in defaults, then config.yaml, then one environment variable per
    setting (SCHEMAORG_VALIDATOR_<SECTION>_<KEY>). A .env file is loaded
    first, so it can set any of those variables.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Path to config.yaml. If None, uses $SCHEMAORG_VALIDATOR_CONFIG
                or the config.yaml at the project root.
        """
        load_dotenv()

        if config_path is None:
            config_path = os.getenv(CONFIG_ENV_VAR)
        if config_path is None:
            config_path = Path(__file__).parents[3] / "config.yaml"

        self.config_path: Optional[Path] = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "ConfigManager":
        """Build a ConfigManager from an in-memory dictionary (no file involved)."""
        manager = cls.__new__(cls)
        manager.config_path = None
        manager._config = manager._layer(config)
        return manager

    def _load_config(self) -> None:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = self._layer(yaml.safe_load(f) or {})

    @staticmethod
    def _layer(file_config: Mapping[str, Any]) -> Dict[str, Any]:
        config = _deep_merge(DEFAULTS, file_config)
        for section, key, value in list(_scalar_settings(config)):
            raw = os.getenv(env_name(section, key))
            if raw is not None:
                config[section][key] = _parse_env_value(raw, value)
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation ('server.port').

        Returns the default when any part of the key is missing.
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(key, default)

    def section(self, name: str) -> Dict[str, Any]:
        """A copy of one top-level section, empty if it does not exist."""
        return copy.deepcopy(self._config.get(name) or {})

    def get_ontology_config(self) -> Dict[str, Any]:
        return self.section('ontology')

    def get_validation_config(self) -> Dict[str, Any]:
        return self.section('validation')

    def get_server_config(self) -> Dict[str, Any]:
        return self.section('server')

    def get_logging_config(self) -> Dict[str, Any]:
        return self.section('logging')

    def reload(self) -> None:
        """Re-read the file and the environment. In-memory configs only re-read the environment."""
        if self.config_path is not None:
            self._load_config()
        else:
            self._config = self._layer(self._config)
