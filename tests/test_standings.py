from league_manager.calculation.standings import compute_standings, head_to_head_points
from league_manager.models.match import MatchResult
from league_manager.utils.match_keys import encode_match_key


def _registry(*results):
    return {
        encode_match_key(home, away): MatchResult(home=h, away=a)
        for home, away, h, a in results
    }


def _names(rows):
    return [r.name for r in rows]


def test_empty_registry_keeps_roster_order_with_zero_counters():
    rows = compute_standings(["A", "B", "C"], {})
    assert _names(rows) == ["A", "B", "C"]
    assert [r.rank for r in rows] == [1, 2, 3]
    for r in rows:
        assert (r.played, r.won, r.drawn, r.lost, r.gf, r.ga, r.gd, r.points) == (0,) * 8


def test_single_win():
    rows = compute_standings(["A", "B"], _registry(("A", "B", 2, 1)))
    a, b = rows
    assert _names(rows) == ["A", "B"]
    assert (a.played, a.won, a.points, a.gd, a.gf, a.ga) == (1, 1, 3, 1, 2, 1)
    assert (b.played, b.lost, b.points, b.gd) == (1, 1, 0, -1)


def test_away_win_is_credited_to_away_team():
    rows = compute_standings(["A", "B"], _registry(("A", "B", 0, 3)))
    assert _names(rows) == ["B", "A"]
    assert rows[0].won == 1 and rows[0].points == 3 and rows[0].gf == 3
    assert rows[1].lost == 1 and rows[1].ga == 3


def test_draw_gives_both_one_point():
    rows = compute_standings(["A", "B"], _registry(("A", "B", 2, 2)))
    for r in rows:
        assert (r.played, r.drawn, r.points, r.gd, r.gf) == (1, 1, 1, 0, 2)


def test_three_way_cycle_keeps_roster_order():
    registry = _registry(("A", "B", 1, 0), ("B", "C", 1, 0), ("C", "A", 1, 0))
    rows = compute_standings(["A", "B", "C"], registry)
    assert _names(rows) == ["A", "B", "C"]
    assert {(r.points, r.gd, r.gf) for r in rows} == {(3, 0, 1)}


def test_head_to_head_breaks_two_way_tie():
    registry = _registry(
        ("A", "B", 1, 0),
        ("B", "C", 1, 0),
        ("D", "A", 1, 0),
    )
    rows = compute_standings(["B", "A", "C", "D"], registry)
    # A and B finish level on points, gd and gf; A won their meeting
    assert _names(rows) == ["D", "A", "B", "C"]
    assert [r.rank for r in rows] == [1, 2, 3, 4]


def test_head_to_head_draw_leaves_order():
    rows = compute_standings(["B", "A"], _registry(("B", "A", 1, 1)))
    assert _names(rows) == ["B", "A"]


def test_tie_without_direct_match_leaves_order():
    registry = _registry(("A", "C", 1, 0), ("B", "D", 1, 0))
    rows = compute_standings(["B", "A", "C", "D"], registry)
    assert _names(rows) == ["B", "A", "C", "D"]


def test_goal_difference_before_goals_scored():
    registry = _registry(("A", "C", 1, 0), ("B", "D", 3, 3), ("B", "C", 4, 2))
    rows = compute_standings(["A", "B", "C", "D"], registry)
    # B: 4 pts; A: 3 pts
    assert _names(rows)[:2] == ["B", "A"]

    registry = _registry(("A", "C", 2, 0), ("B", "D", 4, 3))
    rows = compute_standings(["B", "A", "C", "D"], registry)
    # level on points, A has the better goal difference despite fewer goals
    assert _names(rows)[:2] == ["A", "B"]


def test_goals_scored_breaks_equal_goal_difference():
    registry = _registry(("A", "C", 1, 0), ("B", "D", 3, 2))
    rows = compute_standings(["A", "B", "C", "D"], registry)
    assert _names(rows)[:2] == ["B", "A"]


def test_incomplete_scores_are_ignored():
    registry = {
        encode_match_key("A", "B"): MatchResult(home=None, away=2),
        encode_match_key("B", "A"): MatchResult(home=1, away=None),
        encode_match_key("A", "C"): MatchResult(),
    }
    rows = compute_standings(["A", "B", "C"], registry)
    assert all(r.played == 0 and r.gf == 0 and r.points == 0 for r in rows)


def test_unknown_teams_and_self_matches_are_skipped():
    registry = _registry(("A", "Z", 5, 0), ("Z", "B", 0, 5), ("A", "A", 1, 0))
    registry["no separator"] = MatchResult(home=1, away=0)
    rows = compute_standings(["A", "B"], registry)
    assert all(r.played == 0 for r in rows)


def test_plain_mapping_values_are_accepted():
    registry = {"A||B": {"home": 2, "away": 0}, "B||A": {"home": "bad"}, "A||C": 7}
    rows = compute_standings(["A", "B", "C"], registry)
    assert rows[0].name == "A"
    assert rows[0].played == 1 and rows[0].points == 3


def test_both_directions_count_as_separate_matches():
    registry = _registry(("A", "B", 2, 0), ("B", "A", 1, 1))
    a, b = compute_standings(["A", "B"], registry)
    assert (a.name, a.played, a.won, a.drawn, a.points) == ("A", 2, 1, 1, 4)
    assert (b.name, b.played, b.lost, b.drawn, b.points) == ("B", 2, 1, 1, 1)


def test_head_to_head_points_sums_both_slots():
    registry = _registry(("A", "B", 2, 0), ("B", "A", 1, 1))
    assert head_to_head_points("A", "B", registry) == 4
    assert head_to_head_points("B", "A", registry) == 1
    assert head_to_head_points("A", "C", registry) is None


def test_duplicate_names_collapse():
    rows = compute_standings(["A", "B", "A"], {})
    assert _names(rows) == ["A", "B"]


def test_invariants_and_ordering_hold():
    teams = ["A", "B", "C", "D", "E"]
    registry = _registry(
        ("A", "B", 3, 1),
        ("C", "A", 2, 2),
        ("D", "E", 0, 1),
        ("B", "C", 4, 0),
        ("E", "A", 1, 3),
        ("D", "B", 2, 2),
        ("C", "D", 1, 0),
    )
    rows = compute_standings(teams, registry)
    assert sorted(_names(rows)) == teams
    assert sum(r.won for r in rows) == sum(r.lost for r in rows)
    for r in rows:
        assert r.points == 3 * r.won + r.drawn
        assert r.gd == r.gf - r.ga
        assert r.played == r.won + r.drawn + r.lost
    for above, below in zip(rows, rows[1:]):
        assert (above.points, above.gd, above.gf) >= (below.points, below.gd, below.gf)


def test_compute_is_idempotent_and_does_not_mutate_inputs():
    teams = ["A", "B", "C"]
    registry = _registry(("A", "B", 1, 0), ("C", "B", 2, 2))
    teams_before = list(teams)
    registry_before = {k: v.model_copy() for k, v in registry.items()}

    first = compute_standings(teams, registry)
    second = compute_standings(teams, registry)

    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]
    assert first[0] is not second[0]
    assert teams == teams_before
    assert registry == registry_before


def test_names_ending_in_pipe_are_counted():
    registry = _registry(("FC |x|", "Real", 3, 0), ("Real", "|B", 1, 1))
    rows = compute_standings(["Real", "FC |x|", "|B"], registry)
    by_name = {r.name: r for r in rows}
    assert _names(rows)[0] == "FC |x|"
    assert (by_name["FC |x|"].played, by_name["FC |x|"].points) == (1, 3)
    assert (by_name["Real"].played, by_name["Real"].points) == (2, 1)
    assert (by_name["|B"].played, by_name["|B"].drawn) == (1, 1)
