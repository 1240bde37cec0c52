from enum import Enum


class MatchOutcome(str, Enum):
    WIN = "WIN"
    DRAW = "DRAW"
    LOSS = "LOSS"

    @property
    def points(self) -> int:
        """League points awarded for this outcome (3-1-0)."""
        return _OUTCOME_POINTS[self]

    def reversed(self) -> "MatchOutcome":
        """The same result seen from the opponent's side."""
        if self is MatchOutcome.WIN:
            return MatchOutcome.LOSS
        if self is MatchOutcome.LOSS:
            return MatchOutcome.WIN
        return MatchOutcome.DRAW


_OUTCOME_POINTS = {
    MatchOutcome.WIN: 3,
    MatchOutcome.DRAW: 1,
    MatchOutcome.LOSS: 0,
}


class ConfirmState(str, Enum):
    IDLE = "IDLE"
    CONFIRMING = "CONFIRMING"
