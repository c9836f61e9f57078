import json

from leaguesim.models import Match, Team, WeeklyResult


def test_team_defaults_start_empty_record():
    team = Team(id=1, name="Lions", strength=80)
    data = team.to_dict()
    assert data["points"] == 0
    assert data["wins"] == data["draws"] == data["losses"] == 0
    assert data["goal_diff"] == 0


def test_team_to_dict_keys_and_values():
    team = Team(
        id=2,
        name="Eagles",
        strength=70,
        points=7,
        goals_for=9,
        goals_against=4,
        goal_diff=5,
        wins=2,
        draws=1,
        losses=0,
    )
    data = team.to_dict()
    assert set(data) == {
        "id",
        "name",
        "strength",
        "points",
        "goals_for",
        "goals_against",
        "goal_diff",
        "wins",
        "draws",
        "losses",
    }
    assert data["name"] == "Eagles"
    assert data["goal_diff"] == 5
    assert Team(**data) == team


def test_unplayed_match_serialises_null_goals():
    match = Match(
        id=3,
        name_home="Lions",
        name_away="Eagles",
        home_team_id=1,
        away_team_id=2,
        week=4,
    )
    data = match.to_dict()
    assert data["home_goals"] is None
    assert data["away_goals"] is None
    assert data["played"] is False
    assert '"home_goals": null' in json.dumps(data)


def test_match_round_trip():
    match = Match(
        id=5,
        name_home="Wolves",
        name_away="Bears",
        home_team_id=3,
        away_team_id=4,
        home_goals=2,
        away_goals=1,
        week=2,
        played=True,
    )
    assert Match(**match.to_dict()) == match


def test_weekly_result_nests_standings():
    teams = [Team(id=1, name="Lions", strength=80), Team(id=2, name="Eagles", strength=70)]
    result = WeeklyResult(week=3, standings=teams)
    data = result.to_dict()
    assert data["week"] == 3
    assert data["standings"] == [t.to_dict() for t in teams]


def test_weekly_result_default_standings_not_shared():
    first = WeeklyResult(week=1)
    second = WeeklyResult(week=2)
    first.standings.append(Team(id=1, name="Lions", strength=80))
    assert second.to_dict()["standings"] == []