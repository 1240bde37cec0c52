# league_manager/utils/match_keys.py
from typing import Iterable, Set, Tuple

# Not escaped: a team name containing this sequence produces an ambiguous key.
MATCH_KEY_SEPARATOR = "||"


def encode_match_key(home: str, away: str) -> str:
    """Builds the registry key for the directed (home, away) match slot."""
    return f"{home}{MATCH_KEY_SEPARATOR}{away}"


def decode_match_key(key: str) -> Tuple[str, str]:
    """Splits a registry key back into (home, away) on the first separator.

    Pipes running on past the separator belong to the home name, so
    ``"FC |x|||Real"`` decodes to ``("FC |x|", "Real")``. An away name starting
    with ``|`` cannot be told apart from that and does not round-trip.
    A key without a separator decodes to ``(key, "")``.
    """
    start = key.find(MATCH_KEY_SEPARATOR)
    if start < 0:
        return key, ""
    end = start + len(MATCH_KEY_SEPARATOR)
    while end < len(key) and key[end] == "|":
        end += 1
    return key[: end - len(MATCH_KEY_SEPARATOR)], key[end:]


def key_involves(key: str, team: str) -> bool:
    """True if the team plays either side of the keyed match."""
    return team in decode_match_key(key)


def keys_for_team(team: str, opponents: Iterable[str]) -> Set[str]:
    """Every registry key the team can hold against the given opponents."""
    keys: Set[str] = set()
    for opponent in opponents:
        if opponent == team:
            continue
        keys.add(encode_match_key(team, opponent))
        keys.add(encode_match_key(opponent, team))
    return keys
