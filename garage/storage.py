"""YAML file storage for the garage snapshot."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .errors import StorageError

logger = logging.getLogger(__name__)


class YamlGarageStore:
    """
    Stores every vehicle record under a top-level ``vehicles`` key.

    Saving always rewrites the whole file.
    """

    def __init__(self, filename: Union[str, Path]):
        self.path = Path(filename)

    def load_all(self) -> List[Dict[str, Any]]:
        """Return the stored records; a missing file means an empty garage."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} must contain a mapping at the top level")
        vehicles = data.get("vehicles") or []
        if not isinstance(vehicles, list):
            raise StorageError(f"'vehicles' in {self.path} must be a list")
        return vehicles

    def save_all(self, records: List[Dict[str, Any]]) -> bool:
        """Overwrite the file with ``records``. Returns False on failure."""
        data = {"vehicles": list(records)}
        try:
            with open(self.path, "w") as fp:
                yaml.dump(
                    data,
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
        except (OSError, yaml.YAMLError) as e:
            logger.error("Could not save garage to %s: %s", self.path, e)
            return False
        return True
