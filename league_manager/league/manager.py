from typing import Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from league_manager.calculation.standings import compute_standings
from league_manager.config.settings import settings
from league_manager.models.enums import ConfirmState
from league_manager.models.league import LeagueState
from league_manager.models.match import MatchRegistry, MatchResult
from league_manager.models.team import TeamStats
from league_manager.storage.json_store import LeagueStore
from league_manager.utils.match_keys import (
    MATCH_KEY_SEPARATOR,
    encode_match_key,
    key_involves,
    keys_for_team,
)


class LeagueError(Exception):
    """Base exception for rejected league edits. State is left unchanged."""

    pass


class DuplicateTeamError(LeagueError):
    """Raised when a team name is already on the roster."""

    pass


class TeamLimitError(LeagueError):
    """Raised when an edit would take the roster outside its size bounds."""

    pass


class UnknownTeamError(LeagueError):
    """Raised when a team name is not on the roster."""

    pass


class InvalidTeamNameError(LeagueError):
    """Raised for blank team names or names that start or end with a pipe."""

    pass


class InvalidMatchError(LeagueError):
    """Raised when a score is entered for an impossible pairing."""

    pass


class LeagueManager:
    """Owns the roster and match registry and recomputes standings on demand.

    When a store is attached the state is saved after every successful edit.
    """

    def __init__(
        self,
        state: Optional[LeagueState] = None,
        store: Optional[LeagueStore] = None,
        min_teams: Optional[int] = None,
        max_teams: Optional[int] = None,
        initial_teams: Optional[List[str]] = None,
    ):
        self.initial_teams = list(
            initial_teams if initial_teams is not None else settings.initial_teams
        )
        self.min_teams = min_teams if min_teams is not None else settings.min_teams
        self.max_teams = max_teams if max_teams is not None else settings.max_teams
        self.state = (
            state if state is not None else LeagueState(teams=list(self.initial_teams))
        )
        self.store = store

    @classmethod
    def from_store(cls, store: LeagueStore, **kwargs) -> "LeagueManager":
        """Startup path: load the persisted league and keep saving to the same store."""
        kwargs.setdefault("initial_teams", store.initial_teams)
        kwargs.setdefault("min_teams", store.min_teams)
        kwargs.setdefault("max_teams", store.max_teams)
        return cls(state=store.load(), store=store, **kwargs)

    @property
    def teams(self) -> List[str]:
        return list(self.state.teams)

    @property
    def matches(self) -> MatchRegistry:
        return dict(self.state.matches)

    def standings(self) -> List[TeamStats]:
        return compute_standings(self.state.teams, self.state.matches)

    def get_score(self, home: str, away: str) -> Optional[MatchResult]:
        return self.state.matches.get(encode_match_key(home, away))

    # --- Scores ---

    def update_score(
        self,
        home: str,
        away: str,
        home_goals: Optional[int],
        away_goals: Optional[int],
    ) -> MatchResult:
        """Records (or overwrites) the result of the directed home/away slot."""
        if home == away:
            raise InvalidMatchError(f"A team cannot play itself: '{home}'")
        for name in (home, away):
            if name not in self.state.teams:
                raise InvalidMatchError(f"'{name}' is not on the roster")

        try:
            result = MatchResult(home=home_goals, away=away_goals)
        except ValidationError as e:
            raise InvalidMatchError(
                f"Invalid score {home_goals}-{away_goals} for {home} vs {away}"
            ) from e
        draft = self._draft()
        draft.matches[encode_match_key(home, away)] = result
        self._commit(draft)
        logger.debug(f"Score {home} {home_goals} - {away_goals} {away}")
        return result

    def clear_scores(self) -> None:
        count = len(self.state.matches)
        draft = self._draft()
        draft.matches = {}
        self._commit(draft)
        logger.info(f"Cleared {count} recorded results.")

    # --- Roster ---

    def add_team(self, name: str) -> str:
        name = self._clean_name(name)
        if len(self.state.teams) >= self.max_teams:
            raise TeamLimitError(f"A league holds at most {self.max_teams} teams.")
        if name in self.state.teams:
            raise DuplicateTeamError(f"Team '{name}' already exists.")
        if MATCH_KEY_SEPARATOR in name:
            logger.warning(
                f"Team name '{name}' contains '{MATCH_KEY_SEPARATOR}'; its match keys will be ambiguous."
            )

        draft = self._draft()
        draft.teams.append(name)
        self._commit(draft)
        logger.info(f"Added team '{name}' ({len(self.state.teams)} teams).")
        return name

    def remove_team(self, name: str) -> None:
        """Removes a team and every recorded result it took part in."""
        if name not in self.state.teams:
            raise UnknownTeamError(f"Team '{name}' does not exist.")
        if len(self.state.teams) <= self.min_teams:
            raise TeamLimitError(f"A league needs at least {self.min_teams} teams.")

        doomed = keys_for_team(name, self.state.teams)
        draft = self._draft()
        draft.teams = [t for t in draft.teams if t != name]
        draft.matches = {
            key: result
            for key, result in draft.matches.items()
            # Roster keys first; decoding only catches entries left over from older rosters
            if key not in doomed and not key_involves(key, name)
        }
        removed = len(self.state.matches) - len(draft.matches)
        self._commit(draft)
        logger.info(f"Removed team '{name}' and {removed} of its results.")

    def rename_team(self, old_name: str, new_name: str) -> str:
        """Renames a team, re-keying its recorded results under the new name."""
        new_name = self._clean_name(new_name)
        if old_name == new_name:
            return new_name
        if old_name not in self.state.teams:
            raise UnknownTeamError(f"Team '{old_name}' does not exist.")
        if new_name in self.state.teams:
            raise DuplicateTeamError(f"Team name '{new_name}' is already in use.")

        renamed_keys: Dict[str, str] = {}
        for opponent in self.state.teams:
            if opponent == old_name:
                continue
            renamed_keys[encode_match_key(old_name, opponent)] = encode_match_key(new_name, opponent)
            renamed_keys[encode_match_key(opponent, old_name)] = encode_match_key(opponent, new_name)

        draft = self._draft()
        draft.teams = [new_name if t == old_name else t for t in draft.teams]
        draft.matches = {
            renamed_keys.get(key, key): result for key, result in draft.matches.items()
        }
        self._commit(draft)
        logger.info(f"Renamed team '{old_name}' to '{new_name}'.")
        return new_name

    def sort_by_rank(self) -> List[str]:
        """Reorders the roster to match the current standings."""
        draft = self._draft()
        draft.teams = [stats.name for stats in self.standings()]
        self._commit(draft)
        return self.teams

    def reset_order(self) -> List[str]:
        """Restores the initial roster. Recorded results are kept."""
        draft = self._draft()
        draft.teams = list(self.initial_teams)
        self._commit(draft)
        return self.teams

    def _clean_name(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidTeamNameError("Team name must not be blank.")
        if name.startswith("|") or name.endswith("|"):
            raise InvalidTeamNameError(
                f"Team name '{name}' must not start or end with '|'."
            )
        return name

    def _draft(self) -> LeagueState:
        return self.state.model_copy(deep=True)

    def _commit(self, draft: LeagueState) -> None:
        """Saves the edited copy, then makes it current. A failed save changes nothing."""
        if self.store is not None:
            self.store.save(draft)
        self.state = draft


class ClearScoresFlow:
    """Two-step confirmation in front of LeagueManager.clear_scores."""

    def __init__(self, manager: LeagueManager):
        self.manager = manager
        self.state = ConfirmState.IDLE

    def request(self) -> ConfirmState:
        self.state = ConfirmState.CONFIRMING
        return self.state

    def confirm(self) -> bool:
        """Clears the scores if a request is pending. Returns whether it cleared."""
        if self.state is not ConfirmState.CONFIRMING:
            return False
        self.manager.clear_scores()
        self.state = ConfirmState.IDLE
        return True

    def cancel(self) -> ConfirmState:
        self.state = ConfirmState.IDLE
        return self.state
