from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from league_manager.models.enums import MatchOutcome
from league_manager.models.match import MatchResult
from league_manager.models.team import TeamStats
from league_manager.utils.match_keys import encode_match_key


def _coerce_result(value: Any) -> Optional[MatchResult]:
    """Accepts a MatchResult or a plain {home, away} mapping; None if unusable."""
    if isinstance(value, MatchResult):
        return value
    if isinstance(value, Mapping):
        try:
            return MatchResult.model_validate(value)
        except ValidationError:
            return None
    return None


def _record(stats: TeamStats, scored: int, conceded: int, outcome: MatchOutcome) -> None:
    stats.played += 1
    stats.gf += scored
    stats.ga += conceded
    if outcome is MatchOutcome.WIN:
        stats.won += 1
    elif outcome is MatchOutcome.DRAW:
        stats.drawn += 1
    else:
        stats.lost += 1
    stats.points += outcome.points


def _sort_key(stats: TeamStats) -> Tuple[int, int, int]:
    return stats.points, stats.gd, stats.gf


def head_to_head_points(
    team: str, opponent: str, registry: Mapping
) -> Optional[int]:
    """Points team earned against opponent over both directed slots.

    Returns None when the two teams have no completed direct match.
    """
    total = 0
    found = False
    for home, away in ((team, opponent), (opponent, team)):
        result = _coerce_result(registry.get(encode_match_key(home, away)))
        if result is None or not result.is_complete:
            continue
        found = True
        outcome = result.outcome_for_home()
        total += outcome.points if home == team else outcome.reversed().points
    return total if found else None


def _apply_head_to_head(ordered: List[TeamStats], registry: Mapping) -> List[TeamStats]:
    """Swaps two-team clusters tied on (points, gd, gf) when their direct result says so.

    Clusters of three or more keep their order.
    """
    out: List[TeamStats] = []
    i = 0
    n = len(ordered)
    while i < n:
        j = i + 1
        while j < n and _sort_key(ordered[j]) == _sort_key(ordered[i]):
            j += 1
        cluster = ordered[i:j]
        if len(cluster) == 2:
            first, second = cluster
            first_pts = head_to_head_points(first.name, second.name, registry)
            second_pts = head_to_head_points(second.name, first.name, registry)
            if first_pts is not None and second_pts is not None and second_pts > first_pts:
                logger.debug(
                    f"Head-to-head puts {second.name} ({second_pts}) above {first.name} ({first_pts})"
                )
                cluster = [second, first]
        out.extend(cluster)
        i = j
    return out


def compute_standings(teams: Iterable[str], registry: Mapping) -> List[TeamStats]:
    """
    Computes the ranked league table from the roster and the match registry.

    Ordering, highest first:
      1) Points (3 win / 1 draw / 0 loss)
      2) Goal difference
      3) Goals for
      4) Head-to-head points, for exactly two tied teams only
    Anything still tied keeps roster order. Ranks are sequential from 1.

    Registry entries with an unset score, a team missing from the roster, or
    home == away are skipped. Nothing is raised and the inputs are not mutated.

    Args:
        teams: Team names in roster order.
        registry: Mapping of encode_match_key(home, away) to MatchResult (or a
                  {"home": ..., "away": ...} mapping).

    Returns:
        A new list of TeamStats, one per distinct team name.
    """
    table: Dict[str, TeamStats] = {}
    for name in teams:
        if name not in table:
            table[name] = TeamStats(name=name)

    # Row team at home, column team away, as the results grid is laid out
    used = 0
    for home in table:
        for away in table:
            if home == away:
                continue
            key = encode_match_key(home, away)
            if key not in registry:
                continue
            used += 1
            result = _coerce_result(registry[key])
            if result is None or not result.is_complete:
                continue
            outcome = result.outcome_for_home()
            _record(table[home], result.home, result.away, outcome)
            _record(table[away], result.away, result.home, outcome.reversed())

    if used < len(registry):
        logger.debug(
            f"Skipped {len(registry) - used} registry entries not matching the roster."
        )

    for stats in table.values():
        stats.gd = stats.gf - stats.ga

    # sorted() is stable with reverse=True, so full ties keep roster order
    ordered = sorted(table.values(), key=_sort_key, reverse=True)
    ordered = _apply_head_to_head(ordered, registry)

    for position, stats in enumerate(ordered, start=1):
        stats.rank = position
    return ordered
