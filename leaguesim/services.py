"""Database-backed services for teams and matches."""

from __future__ import annotations

import sqlite3
from typing import Any

from .championship import (
    DEFAULT_SIMULATIONS,
    SEASON_WEEKS,
    simulate_championship_probabilities,
)
from .models import Match, Team
from .simulator import RandomSource, simulate_match

NOT_ENOUGH_WEEKS_MESSAGE = (
    "Not enough weeks played to calculate championship probabilities"
)
MIN_WEEKS_FOR_PROBABILITIES = 4

_TEAM_COLUMNS = (
    "id, name, strength, points, goals_for, goals_against, "
    "goal_diff, wins, draws, losses"
)
_MATCH_COLUMNS = (
    "id, name_home, name_away, home_team_id, away_team_id, "
    "home_goals, away_goals, week, played"
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS teams (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    strength INTEGER NOT NULL,
    points INTEGER NOT NULL DEFAULT 0,
    goals_for INTEGER NOT NULL DEFAULT 0,
    goals_against INTEGER NOT NULL DEFAULT 0,
    goal_diff INTEGER NOT NULL DEFAULT 0,
    wins INTEGER NOT NULL DEFAULT 0,
    draws INTEGER NOT NULL DEFAULT 0,
    losses INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS matches (
    id INTEGER PRIMARY KEY,
    name_home TEXT NOT NULL,
    name_away TEXT NOT NULL,
    home_team_id INTEGER NOT NULL,
    away_team_id INTEGER NOT NULL,
    home_goals INTEGER,
    away_goals INTEGER,
    week INTEGER NOT NULL,
    played BOOLEAN NOT NULL DEFAULT 0
);
"""


class LeagueError(Exception):
    """Raised when a league operation cannot be completed."""


class SeasonEndedError(LeagueError):
    """Raised when every week of the season has already been played."""

    def __init__(self, message: str = "Season has ended") -> None:
        super().__init__(message)


def connect(path: str = ":memory:") -> sqlite3.Connection:
    """Open the league database at ``path`` and make sure its tables exist."""
    db = sqlite3.connect(path, check_same_thread=False)
    create_schema(db)
    return db


def create_schema(db: sqlite3.Connection) -> None:
    """Create the ``teams`` and ``matches`` tables if they are missing."""
    with db:
        db.executescript(_SCHEMA)


def _team_from_row(row: tuple[Any, ...]) -> Team:
    return Team(*row)


def _match_from_row(row: tuple[Any, ...]) -> Match:
    *fields, played = row
    return Match(*fields, played=bool(played))


class TeamService:
    """Reads and resets the teams table."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def get_teams(self) -> list[Team]:
        """Return every team in table order."""
        rows = self.db.execute(f"SELECT {_TEAM_COLUMNS} FROM teams").fetchall()
        return [_team_from_row(row) for row in rows]

    def reset_teams(self) -> None:
        """Clear every team's record."""
        with self.db:
            self.db.execute(
                "UPDATE teams SET points = 0, goals_for = 0, goals_against = 0, "
                "goal_diff = 0, wins = 0, draws = 0, losses = 0"
            )


class MatchService:
    """Plays, lists and resets matches, and estimates title chances."""

    simulations: int = DEFAULT_SIMULATIONS

    def __init__(
        self,
        db: sqlite3.Connection,
        team_service: TeamService,
        rng: RandomSource | None = None,
    ) -> None:
        self.db = db
        self.team_service = team_service
        self.rng = rng

    def get_matches(self) -> list[Match]:
        """Return every match in table order."""
        rows = self.db.execute(f"SELECT {_MATCH_COLUMNS} FROM matches").fetchall()
        return [_match_from_row(row) for row in rows]

    def play_week(self) -> tuple[int, list[Team]]:
        """Play the next unplayed week and return it with the new standings.

        Raises :class:`SeasonEndedError` once the final week has been played.
        """
        with self.db:
            (last_played,) = self.db.execute(
                "SELECT MAX(week) FROM matches WHERE played = 1"
            ).fetchone()
            if last_played is None:
                next_week = 1
            elif last_played < SEASON_WEEKS:
                next_week = last_played + 1
            else:
                raise SeasonEndedError()

            fixtures = self.db.execute(
                "SELECT id, home_team_id, away_team_id FROM matches "
                "WHERE week = ? AND played = 0",
                (next_week,),
            ).fetchall()
            for match_id, home_id, away_id in fixtures:
                home_goals, away_goals = simulate_match(
                    self._strength(home_id), self._strength(away_id), self.rng
                )
                self.db.execute(
                    "UPDATE matches SET home_goals = ?, away_goals = ?, played = 1 "
                    "WHERE id = ?",
                    (home_goals, away_goals, match_id),
                )
                self._record_result(home_id, home_goals, away_goals)
                self._record_result(away_id, away_goals, home_goals)

        rows = self.db.execute(
            f"SELECT {_TEAM_COLUMNS} FROM teams "
            "ORDER BY points DESC, goal_diff DESC, goals_for DESC"
        ).fetchall()
        return next_week, [_team_from_row(row) for row in rows]

    def reset_matches(self) -> None:
        """Mark every match unplayed and clear its score."""
        with self.db:
            self.db.execute(
                "UPDATE matches SET home_goals = NULL, away_goals = NULL, played = 0"
            )

    def probabilities_message(self, week: int) -> str | dict[int, float]:
        """Return title chances after ``week``, or a message why there are none."""
        if week < MIN_WEEKS_FOR_PROBABILITIES:
            return NOT_ENOUGH_WEEKS_MESSAGE
        try:
            return simulate_championship_probabilities(
                self.team_service, self, week, self.simulations, self.rng
            )
        except (sqlite3.Error, LeagueError) as exc:
            return f"Could not calculate probabilities: {exc}"

    def _strength(self, team_id: int) -> int:
        row = self.db.execute(
            "SELECT strength FROM teams WHERE id = ?", (team_id,)
        ).fetchone()
        if row is None:
            raise LeagueError(f"team {team_id} not found")
        return row[0]

    def _record_result(self, team_id: int, goals_for: int, goals_against: int) -> None:
        win = int(goals_for > goals_against)
        draw = int(goals_for == goals_against)
        loss = int(goals_for < goals_against)
        self.db.execute(
            "UPDATE teams SET goals_for = goals_for + ?, "
            "goals_against = goals_against + ?, goal_diff = goal_diff + ?, "
            "points = points + ?, wins = wins + ?, draws = draws + ?, "
            "losses = losses + ? WHERE id = ?",
            (
                goals_for,
                goals_against,
                goals_for - goals_against,
                3 * win + draw,
                win,
                draw,
                loss,
                team_id,
            ),
        )