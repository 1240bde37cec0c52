from typing import Dict, Optional

from pydantic import BaseModel, Field

from .enums import MatchOutcome


class MatchResult(BaseModel):
    """Scores recorded for one directed (home, away) match slot.

    Either score may be unset while a result is being entered; such a match
    counts as not yet played.
    """

    home: Optional[int] = Field(None, ge=0, description="Goals scored by the home team.")
    away: Optional[int] = Field(None, ge=0, description="Goals scored by the away team.")

    @property
    def is_complete(self) -> bool:
        return self.home is not None and self.away is not None

    def outcome_for_home(self) -> Optional[MatchOutcome]:
        """Outcome from the home team's side, or None if the match is unplayed."""
        if not self.is_complete:
            return None
        if self.home > self.away:
            return MatchOutcome.WIN
        if self.home < self.away:
            return MatchOutcome.LOSS
        return MatchOutcome.DRAW


# Keyed by encode_match_key(home, away)
MatchRegistry = Dict[str, MatchResult]
