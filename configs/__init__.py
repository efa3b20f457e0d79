"""
Trade or Fade configuration management

Loads the game configuration files shipped next to this module and validates
them against their JSON Schemas.
"""

import json
import logging
from typing import Dict, Any
from pathlib import Path

import jsonschema

from tradefade.models.config import GameConfig

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent

CONFIG_FILES = {
    'game': ('game.json', 'game.schema.json'),
}


class ConfigLoader:
    """Loads and manages game configurations."""

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files
                (defaults to the configs package directory)
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.configs = {}
        self._load_all_configs()

    def _load_one(self, config_name: str) -> Dict[str, Any]:
        filename, schema_name = CONFIG_FILES[config_name]
        config_path = self.config_dir / filename
        if not config_path.exists():
            logger.warning("config_missing", extra={"path": str(config_path)})
            return {}

        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        schema_path = self.config_dir / schema_name
        if schema_path.exists():
            with open(schema_path, 'r', encoding='utf-8') as sf:
                schema = json.load(sf)
            jsonschema.validate(instance=data, schema=schema)
        return data

    def _load_all_configs(self) -> None:
        """Load all configuration files."""
        for config_name in CONFIG_FILES:
            try:
                self.configs[config_name] = self._load_one(config_name)
            except (OSError, ValueError, jsonschema.ValidationError, jsonschema.SchemaError) as e:
                # Invalid file: run on defaults rather than half-applied values
                logger.warning("config_load_failed", extra={"config": config_name, "error": str(e)})
                self.configs[config_name] = {}

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """
        Get configuration by name.

        Args:
            config_name: Name of configuration

        Returns:
            Configuration dictionary
        """
        return self.configs.get(config_name, {})

    def get_all_configs(self) -> Dict[str, Dict[str, Any]]:
        return self.configs.copy()

    def reload_config(self, config_name: str) -> None:
        """
        Reload specific configuration; a failed reload keeps the prior values.

        Raises:
            KeyError: If config_name is not a known configuration
        """
        if config_name not in CONFIG_FILES:
            raise KeyError(f"Unknown config {config_name!r}")
        try:
            self.configs[config_name] = self._load_one(config_name)
        except (OSError, ValueError, jsonschema.ValidationError, jsonschema.SchemaError) as e:
            logger.warning("config_reload_failed", extra={"config": config_name, "error": str(e)})

    def load_game_config(self) -> GameConfig:
        """Build the typed GameConfig from game.json."""
        return GameConfig.from_dict(self.get_config('game'))


# Global configuration loader instance
config_loader = ConfigLoader()
