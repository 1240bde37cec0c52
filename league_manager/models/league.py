from typing import List

from pydantic import BaseModel, Field

from .match import MatchRegistry


class LeagueState(BaseModel):
    """The caller-owned league snapshot: roster order plus recorded results.

    This is also the persisted blob, serialised as ``{"teams": [...], "matches": {...}}``.
    """

    teams: List[str] = Field(default_factory=list)
    matches: MatchRegistry = Field(default_factory=dict)
