"""
JSON-based storage for engine state.

Simple, file-based storage that persists the whole engine as one JSON
document: schedule config, roles, accounts, collectors and token balances.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..core.models import EngineState

logger = logging.getLogger(__name__)


class EngineStore:
    """
    JSON-based storage for an EngineState snapshot.

    Usage:
        store = EngineStore(Path("vesting_state.json"))

        # Save
        store.save(engine.to_state())

        # Load
        state = store.load()
        engine = VestingEngine.from_state(state, clock)
    """

    def __init__(self, path: Path | str):
        """Initialize store with the state file path."""
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if a state file exists."""
        return self.path.exists()

    def save(self, state: EngineState) -> Path:
        """
        Save a snapshot to the JSON file.

        Returns the path to the saved file.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)

        logger.debug(f"Saved engine state to {self.path}")
        return self.path

    def load(self) -> Optional[EngineState]:
        """
        Load a snapshot from the JSON file.

        Returns None if the file doesn't exist.
        """
        if not self.path.exists():
            return None

        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(str(self.path), f"invalid state file: {e}")

        try:
            return EngineState.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(str(self.path), str(e))

    def delete(self) -> bool:
        """Delete the state file. Returns True if deleted."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False
