from typing import Optional

from pydantic import BaseModel


class TeamStats(BaseModel):
    """Aggregated table row for one team, derived fresh on every computation."""

    name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    gf: int = 0  # goals for
    ga: int = 0  # goals against
    gd: int = 0  # gf - ga
    points: int = 0
    rank: Optional[int] = None  # 1-based, filled in after sorting
