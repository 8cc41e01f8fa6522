"""File-based storage implementation."""

import json
import logging
import os

from core.config import CONFIG_FILE
from core.interfaces import Storage

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """Key-value storage kept in a single JSON file."""

    def __init__(self, config_file: str = None, state_dir: str = None):
        self.config_file = config_file or CONFIG_FILE
        self.state_dir = state_dir or os.path.dirname(self.config_file)

    def _get_state_file(self) -> str:
        return os.path.join(self.state_dir, 'spellmaster_storage.json')

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file, 'r') as f:
                config = json.load(f)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable config file {self.config_file}: {e}")
            return {}
        if not isinstance(config, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a JSON object")
            return {}
        return config

    def _load_items(self) -> dict:
        state_file = self._get_state_file()
        if not os.path.exists(state_file):
            return {}
        try:
            with open(state_file, 'r') as f:
                items = json.load(f)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable storage file {state_file}: {e}")
            return {}
        return items if isinstance(items, dict) else {}

    def _save_items(self, items: dict) -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        state_file = self._get_state_file()
        tmp_file = state_file + '.tmp'
        with open(tmp_file, 'w') as f:
            json.dump(items, f, indent=2)
        os.replace(tmp_file, state_file)

    def get_item(self, key: str) -> str | None:
        value = self._load_items().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._load_items()
        items[key] = value
        self._save_items(items)
