"""Monte Carlo estimate of each team's chance of winning the league."""

from __future__ import annotations

import dataclasses
import math
from collections import Counter
from collections.abc import Iterable
from typing import Protocol

from .models import Match, Team
from .simulator import RandomSource, simulate_match

SEASON_WEEKS = 6
DEFAULT_SIMULATIONS = 15000


class _TeamSource(Protocol):
    def get_teams(self) -> list[Team]: ...


class _MatchSource(Protocol):
    def get_matches(self) -> list[Match]: ...


def _round3(value: float) -> float:
    """Round to three decimals, halves away from zero."""
    scaled = value * 1000
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / 1000.0


def simulate_championship_probabilities(
    team_service: _TeamSource,
    match_service: _MatchSource,
    current_week: int,
    simulations: int = DEFAULT_SIMULATIONS,
    rng: RandomSource | None = None,
) -> dict[int, float]:
    """Return each team's title chance in percent, rounded to three decimals.

    The remaining weeks after ``current_week`` are played out ``simulations``
    times on copies of the current table.
    """
    initial_teams = team_service.get_teams()
    initial_matches = match_service.get_matches()

    counts: Counter[int] = Counter()
    for _ in range(simulations):
        teams = [dataclasses.replace(team) for team in initial_teams]
        matches = [dataclasses.replace(match) for match in initial_matches]
        for week in range(current_week + 1, SEASON_WEEKS + 1):
            play_week_simulation(week, teams, matches, rng)
        counts[find_leader(teams)] += 1

    probabilities = {1: 0.0, 2: 0.0, 3: 0.0, 4: 0.0}
    for team_id, count in counts.items():
        probabilities[team_id] = _round3(count / simulations * 100.0)
    return probabilities


def play_week_simulation(
    week: int,
    teams: list[Team],
    matches: list[Match],
    rng: RandomSource | None = None,
) -> None:
    """Play every unplayed match of ``week`` in place, updating the teams."""
    for match in matches:
        if match.week != week or match.played:
            continue
        home = find_team_by_id(teams, match.home_team_id)
        away = find_team_by_id(teams, match.away_team_id)
        if home is None or away is None:
            continue
        home_goals, away_goals = simulate_match(home.strength, away.strength, rng)
        match.home_goals = home_goals
        match.away_goals = away_goals
        match.played = True
        update_team_stats(home, home_goals, away_goals)
        update_team_stats(away, away_goals, home_goals)


def find_team_by_id(teams: Iterable[Team], team_id: int) -> Team | None:
    """Return the team with the given id, or ``None``."""
    return next((team for team in teams if team.id == team_id), None)


def update_team_stats(team: Team, goals_for: int, goals_against: int) -> None:
    """Record one match result on ``team``."""
    team.goals_for += goals_for
    team.goals_against += goals_against
    team.goal_diff = team.goals_for - team.goals_against
    if goals_for > goals_against:
        team.wins += 1
        team.points += 3
    elif goals_for < goals_against:
        team.losses += 1
    else:
        team.draws += 1
        team.points += 1


def find_leader(teams: Iterable[Team]) -> int:
    """Return the id of the table leader, or -1 if there are no teams.

    Ties on points are broken by goal difference, then goals scored; the
    earlier team wins a full tie.
    """
    leader_id = -1
    max_points = max_goal_diff = max_goals_for = -1
    for team in teams:
        if (team.points, team.goal_diff, team.goals_for) > (
            max_points,
            max_goal_diff,
            max_goals_for,
        ):
            max_points = team.points
            max_goal_diff = team.goal_diff
            max_goals_for = team.goals_for
            leader_id = team.id
    return leader_id