"""
JSON-file persistence for the best score.

The file is a flat key/value object, so other small game settings can share
it later:
    {"tof_highScore": 110}
"""

import json
import logging
import os
from typing import Any, Dict

from tradefade.orchestration.ports import BestScoreStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tof_highScore"


class JsonBestScoreStore(BestScoreStore):
    """Best score keyed by a fixed name inside a JSON file."""

    def __init__(self, path: str, key: str = DEFAULT_KEY):
        self.path = path
        self.key = key

    def _load_json_safe(self) -> Dict[str, Any]:
        try:
            if os.path.exists(self.path):
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning("best_score_file_not_object", extra={"path": self.path})
        except (OSError, ValueError) as e:
            logger.warning("best_score_load_failed", extra={"path": self.path, "error": str(e)})
        return {}

    def read_best(self) -> int:
        """Stored value, or 0 when missing, unparseable or negative."""
        raw = self._load_json_safe().get(self.key)
        if raw is None or isinstance(raw, bool):
            return 0
        try:
            value = int(str(raw).strip(), 10)
        except ValueError:
            logger.warning("best_score_unparseable", extra={"path": self.path, "raw": str(raw)})
            return 0
        return max(value, 0)

    def write_best(self, value: int) -> None:
        """
        Persist value under the fixed key, keeping any other keys in the file.

        Raises:
            OSError: If the file cannot be written (the engine logs and carries on)
        """
        data = self._load_json_safe()
        data[self.key] = int(value)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)
        logger.info("best_score_saved", extra={"path": self.path, "best_score": int(value)})
