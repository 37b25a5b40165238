# src/flappy/storage.py
"""
JSON-file persistence for player preferences and the best score.

File layout:
    {"flappySettings": {"gapSize": 150, ...}, "flappyBestScore": 12}
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Union

from pydantic import ValidationError

from .config import SETTINGS_KEY, BEST_SCORE_KEY, SETTINGS_FILE_DEFAULT
from .events import Event, EventType
from .tunables import Tunables

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, path: Union[str, Path] = SETTINGS_FILE_DEFAULT, strict: bool = False):
        self.path = Path(path).expanduser()
        self.strict = strict

    # --- raw file access ---
    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s (%s); using defaults", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not an object", self.path)
            return {}
        return data

    def _write_key(self, key: str, value: Any):
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # write a sibling file, then swap it in
            tmp = self.path.with_name(self.path.name + ".tmp")
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            logger.warning("Could not write %s: %s", self.path, e)
            if self.strict:
                raise

    # --- settings ---
    def load_tunables(self) -> Tunables:
        raw = self._read().get(SETTINGS_KEY)
        if raw is None:
            return Tunables()
        if not isinstance(raw, dict):
            logger.warning("Stored %s is not an object; using defaults", SETTINGS_KEY)
            return Tunables()
        try:
            tunables = Tunables.from_dict(raw)
        except ValidationError as e:
            logger.warning("Stored settings rejected (%s); using defaults", e)
            return Tunables()
        logger.info("Loaded settings from %s", self.path)
        return tunables

    def save_tunables(self, tunables: Tunables):
        self._write_key(SETTINGS_KEY, tunables.to_dict())
        logger.info("Saved settings to %s", self.path)

    # --- best score ---
    def load_best_score(self) -> int:
        raw = self._read().get(BEST_SCORE_KEY, 0)
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            logger.warning("Stored best score %r is invalid; using 0", raw)
            return 0
        return raw

    def save_best_score(self, score: int) -> int:
        """Store `score` if it beats the stored best. Returns the best after saving."""
        best = self.load_best_score()
        if score > best:
            self._write_key(BEST_SCORE_KEY, int(score))
            best = int(score)
        return best

    def attach(self, sim) -> Callable[[], None]:
        """Persist the best score whenever `sim` ends a session on a new best."""
        def on_end(event: Event):
            if event.data.get("new_best"):
                self.save_best_score(event.data["best_score"])

        return sim.bus.subscribe(EventType.SESSION_ENDED, on_end)
