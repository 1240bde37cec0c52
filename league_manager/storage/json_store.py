# league_manager/storage/json_store.py
import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from league_manager.config.settings import settings
from league_manager.models.league import LeagueState
from league_manager.models.match import MatchRegistry, MatchResult


class StorageError(Exception):
    """Raised when the league state cannot be written."""

    pass


_TEAMS_ADAPTER = TypeAdapter(List[str])


class LeagueStore:
    """Loads and saves the {teams, matches} blob as a JSON file.

    Loading never raises: a missing or malformed file, or a malformed field,
    falls back to the defaults (configured initial roster, empty registry).
    Saving replaces the file in one step, so a failed write leaves the
    previous file intact.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        initial_teams: Optional[List[str]] = None,
        min_teams: Optional[int] = None,
        max_teams: Optional[int] = None,
    ):
        self.path = Path(path or settings.storage_path)
        self.initial_teams = list(
            initial_teams if initial_teams is not None else settings.initial_teams
        )
        self.min_teams = min_teams if min_teams is not None else settings.min_teams
        self.max_teams = max_teams if max_teams is not None else settings.max_teams

    def default_state(self) -> LeagueState:
        return LeagueState(teams=list(self.initial_teams), matches={})

    def load(self) -> LeagueState:
        """Reads the persisted league, falling back to defaults field by field."""
        if not self.path.exists():
            logger.info(f"No saved league at {self.path}, starting fresh.")
            return self.default_state()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                blob = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load league data from {self.path}: {e}")
            return self.default_state()

        if not isinstance(blob, dict):
            logger.error(
                f"League data in {self.path} is not an object ({type(blob).__name__}), starting fresh."
            )
            return self.default_state()

        state = self.default_state()
        teams = self._parse_teams(blob.get("teams"))
        if teams is not None:
            state.teams = teams
        matches = self._parse_matches(blob.get("matches"))
        if matches is not None:
            state.matches = matches

        logger.info(
            f"Loaded league from {self.path}: {len(state.teams)} teams, {len(state.matches)} results."
        )
        return state

    def save(self, state: LeagueState) -> None:
        """Writes the league state; raises StorageError on IO failure."""
        blob = state.model_dump(mode="json")
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(blob, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Failed to write league data to {self.path}: {e}")
            raise StorageError(f"Could not save league data to {self.path}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug(f"Saved league to {self.path}")

    def _parse_teams(self, raw: Any) -> Optional[List[str]]:
        if not raw:
            return None
        try:
            teams = _TEAMS_ADAPTER.validate_python(raw, strict=True)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed 'teams' field: {e.error_count()} error(s).")
            return None

        unique = list(dict.fromkeys(teams))
        if len(unique) < len(teams):
            logger.warning(f"Dropping {len(teams) - len(unique)} duplicate team name(s).")
        if not self.min_teams <= len(unique) <= self.max_teams:
            logger.warning(
                f"Loaded {len(unique)} teams, outside the configured {self.min_teams}-{self.max_teams}."
            )
        return unique

    def _parse_matches(self, raw: Any) -> Optional[MatchRegistry]:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning(
                f"Ignoring malformed 'matches' field of type {type(raw).__name__}."
            )
            return None

        matches: MatchRegistry = {}
        for key, value in raw.items():
            try:
                matches[key] = MatchResult.model_validate(value)
            except ValidationError as e:
                logger.warning(f"Dropping malformed result for '{key}': {e.error_count()} error(s).")
        return matches
