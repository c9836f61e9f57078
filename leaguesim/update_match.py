"""Changing the score of a match and keeping the table consistent."""

from __future__ import annotations

import sqlite3

from .models import Team
from .services import LeagueError, MatchService, TeamService


def _apply_result(
    db: sqlite3.Connection,
    team_id: int,
    goals_for: int,
    goals_against: int,
    sign: int,
) -> None:
    """Add (``sign=1``) or remove (``sign=-1``) one result from a team's record.

    A team that does not exist is left alone.
    """
    exists = db.execute("SELECT 1 FROM teams WHERE id = ?", (team_id,)).fetchone()
    if exists is None:
        return
    win = int(goals_for > goals_against)
    draw = int(goals_for == goals_against)
    loss = int(goals_for < goals_against)
    db.execute(
        "UPDATE teams SET points = points + ?, goals_for = goals_for + ?, "
        "goals_against = goals_against + ?, goal_diff = goal_diff + ?, "
        "wins = wins + ?, draws = draws + ?, losses = losses + ? WHERE id = ?",
        (
            sign * (3 * win + draw),
            sign * goals_for,
            sign * goals_against,
            sign * (goals_for - goals_against),
            sign * win,
            sign * draw,
            sign * loss,
            team_id,
        ),
    )


def update_match_result(
    db: sqlite3.Connection,
    team_service: TeamService,
    match_service: MatchService,
    match_id: int,
    home_goals: int,
    away_goals: int,
) -> tuple[list[Team], str | dict[int, float]]:
    """Set a match's score, fix both teams' records and return the new state.

    Returns the teams and the championship probabilities for the match's week.
    """
    try:
        row = db.execute(
            "SELECT home_team_id, away_team_id, IFNULL(home_goals, 0), "
            "IFNULL(away_goals, 0), played, week FROM matches WHERE id = ?",
            (match_id,),
        ).fetchone()
    except sqlite3.Error as exc:
        raise LeagueError("match not found") from exc
    if row is None:
        raise LeagueError("match not found")
    home_id, away_id, old_home, old_away, played, week = row

    with db:
        if played:
            _apply_result(db, home_id, old_home, old_away, -1)
            _apply_result(db, away_id, old_away, old_home, -1)
        try:
            db.execute(
                "UPDATE matches SET home_goals = ?, away_goals = ?, played = 1 "
                "WHERE id = ?",
                (home_goals, away_goals, match_id),
            )
        except sqlite3.Error as exc:
            raise LeagueError("failed to update match") from exc
        _apply_result(db, home_id, home_goals, away_goals, 1)
        _apply_result(db, away_id, away_goals, home_goals, 1)

    try:
        teams = team_service.get_teams()
    except sqlite3.Error as exc:
        raise LeagueError("failed to get teams") from exc

    probabilities = match_service.probabilities_message(week)
    return teams, probabilities