import random

import pytest

from leaguesim.services import LeagueError, MatchService, TeamService, connect
from leaguesim.update_match import update_match_result

TEAMS = [
    (1, "Lions", 90),
    (2, "Eagles", 80),
    (3, "Wolves", 70),
    (4, "Sharks", 60),
]

FIXTURES = [
    (1, 1, 2), (1, 3, 4),
    (2, 1, 3), (2, 2, 4),
    (3, 1, 4), (3, 2, 3),
    (4, 2, 1), (4, 4, 3),
    (5, 3, 1), (5, 4, 2),
    (6, 4, 1), (6, 3, 2),
]


@pytest.fixture
def league():
    db = connect(":memory:")
    names = {team_id: name for team_id, name, _ in TEAMS}
    with db:
        db.executemany(
            "INSERT INTO teams (id, name, strength) VALUES (?, ?, ?)", TEAMS
        )
        db.executemany(
            "INSERT INTO matches (name_home, name_away, home_team_id, away_team_id, week)"
            " VALUES (?, ?, ?, ?, ?)",
            [(names[h], names[a], h, a, w) for w, h, a in FIXTURES],
        )
    teams = TeamService(db)
    matches = MatchService(db, teams, random.Random(3))
    matches.simulations = 200
    return db, teams, matches


def _by_id(teams):
    return {t.id: t for t in teams}


def test_unknown_match_raises(league):
    db, teams, matches = league
    with pytest.raises(LeagueError, match="match not found"):
        update_match_result(db, teams, matches, 999, 1, 0)


def test_result_on_unplayed_match_home_win(league):
    db, teams, matches = league
    result, probabilities = update_match_result(db, teams, matches, 1, 3, 1)
    table = _by_id(result)
    home, away = table[1], table[2]
    assert (home.points, home.wins, home.goals_for, home.goals_against) == (3, 1, 3, 1)
    assert home.goal_diff == 3 - 1
    assert (away.points, away.losses, away.goals_for, away.goals_against) == (0, 1, 1, 3)
    assert probabilities == (
        "Not enough weeks played to calculate championship probabilities"
    )


def test_match_row_is_updated(league):
    db, teams, matches = league
    update_match_result(db, teams, matches, 2, 0, 2)
    match = next(m for m in matches.get_matches() if m.id == 2)
    assert (match.home_goals, match.away_goals, match.played) == (0, 2, True)


def test_changing_result_reverts_old_one(league):
    db, teams, matches = league
    update_match_result(db, teams, matches, 1, 3, 1)
    result, _ = update_match_result(db, teams, matches, 1, 0, 0)
    table = _by_id(result)
    for team_id in (1, 2):
        team = table[team_id]
        assert (team.points, team.draws, team.wins, team.losses) == (1, 1, 0, 0)
        assert (team.goals_for, team.goals_against, team.goal_diff) == (0, 0, 0)


def test_change_draw_to_away_win(league):
    db, teams, matches = league
    update_match_result(db, teams, matches, 1, 2, 2)
    result, _ = update_match_result(db, teams, matches, 1, 1, 4)
    table = _by_id(result)
    assert (table[1].draws, table[1].losses, table[1].points) == (0, 1, 0)
    assert (table[2].draws, table[2].wins, table[2].points) == (0, 1, 3)
    assert table[2].goal_diff == 4 - 1


def test_same_result_after_play_week_leaves_table_unchanged(league):
    db, teams, matches = league
    matches.play_week()
    before = _by_id(teams.get_teams())
    for match in matches.get_matches():
        if match.played:
            update_match_result(
                db, teams, matches, match.id, match.home_goals, match.away_goals
            )
    assert _by_id(teams.get_teams()) == before


def test_untouched_teams_are_unchanged(league):
    db, teams, matches = league
    before = _by_id(teams.get_teams())
    result, _ = update_match_result(db, teams, matches, 1, 5, 0)
    table = _by_id(result)
    assert table[3] == before[3]
    assert table[4] == before[4]


def test_probabilities_for_late_week(league):
    db, teams, matches = league
    for _ in range(4):
        matches.play_week()
    late_match = next(m for m in matches.get_matches() if m.week == 4)
    _, probabilities = update_match_result(db, teams, matches, late_match.id, 2, 0)
    assert set(probabilities) == {1, 2, 3, 4}
    assert sum(probabilities.values()) == pytest.approx(100.0, abs=0.01)


def test_table_invariants_after_updates(league):
    db, teams, matches = league
    update_match_result(db, teams, matches, 1, 2, 1)
    update_match_result(db, teams, matches, 2, 1, 1)
    update_match_result(db, teams, matches, 1, 0, 3)
    table = teams.get_teams()
    assert sum(t.wins for t in table) == sum(t.losses for t in table)
    assert sum(t.goals_for for t in table) == sum(t.goals_against for t in table)
    for t in table:
        assert t.points == 3 * t.wins + t.draws
        assert t.goal_diff == t.goals_for - t.goals_against