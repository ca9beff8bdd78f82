"""High score persistence and management."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from backend.config import DEFAULT_RULES, HIGHSCORE_KEY, GameRules
from backend.errors import PersistenceReadError, PersistenceWriteError
from backend.storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreRecord:
    name: str
    level: int
    date: str

    @classmethod
    def create(cls, name: str, level: int, when: datetime | None = None) -> ScoreRecord:
        when = when or datetime.now(timezone.utc)
        return cls(name=name, level=level, date=when.isoformat(timespec="milliseconds"))

    @property
    def timestamp(self) -> datetime:
        ts = datetime.fromisoformat(self.date)
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts

    @classmethod
    def from_dict(cls, raw: dict) -> ScoreRecord:
        """Build a record from decoded JSON, validating every field."""
        name, level, date = raw["name"], raw["level"], raw["date"]
        if not isinstance(name, str) or not isinstance(date, str):
            raise TypeError("name and date must be strings")
        if isinstance(level, bool) or not isinstance(level, int):
            raise TypeError("level must be an integer")
        datetime.fromisoformat(date)
        return cls(name=name, level=level, date=date)


def rank(records: list[ScoreRecord], limit: int) -> list[ScoreRecord]:
    """Sort by level (highest first), then most recent first, and keep *limit*."""
    return sorted(records, key=lambda r: (r.level, r.timestamp), reverse=True)[:limit]


class ScoreStore:
    """Loads, merges and saves the top-N leaderboard through a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        rules: GameRules = DEFAULT_RULES,
        key: str = HIGHSCORE_KEY,
    ) -> None:
        self._store = store
        self._rules = rules
        self._key = key
        self._scores: list[ScoreRecord] = []
        self._loaded = False

    @property
    def scores(self) -> list[ScoreRecord]:
        return list(self._scores)

    # -- persistence ----------------------------------------------------------

    def load(self) -> list[ScoreRecord]:
        """Read the leaderboard. Any failure yields an empty list."""
        self._scores = self._read()
        self._loaded = True
        return self.scores

    def _read(self) -> list[ScoreRecord]:
        try:
            raw = self._store.get(self._key)
        except PersistenceReadError:
            logger.exception("Error loading high scores")
            return []
        if raw is None:
            return []

        try:
            entries = json.loads(raw)
        except ValueError:
            logger.error("Error loading high scores: stored value is not JSON")
            return []
        if not isinstance(entries, list):
            logger.error("Error loading high scores: expected a list, got %s", type(entries).__name__)
            return []

        records: list[ScoreRecord] = []
        for entry in entries:
            try:
                records.append(ScoreRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed score entry %r: %s", entry, exc)
        return rank(records, self._rules.max_scores)

    def save(self) -> None:
        payload = json.dumps([asdict(r) for r in self._scores], ensure_ascii=False)
        try:
            self._store.set(self._key, payload)
        except PersistenceWriteError:
            logger.exception("Error saving high scores")
        else:
            logger.debug("Saved %d high scores", len(self._scores))

    # -- queries --------------------------------------------------------------

    def submit(self, record: ScoreRecord) -> list[ScoreRecord]:
        """Merge *record* into the leaderboard, persist it, and return the result.

        The stored list is read first if nothing has been loaded yet. On a
        tie the new record ranks ahead of older ones.
        """
        if not self._loaded:
            self.load()
        self._scores = rank([record, *self._scores], self._rules.max_scores)
        self.save()
        logger.info("Recorded score: %s reached level %d", record.name, record.level)
        return self.scores
