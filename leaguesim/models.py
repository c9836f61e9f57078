"""Domain models for the league: teams, matches and weekly standings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Team:
    """A football team together with its league record."""

    id: int
    name: str
    strength: int
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_diff: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the team in its JSON form."""
        return {
            "id": self.id,
            "name": self.name,
            "strength": self.strength,
            "points": self.points,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_diff": self.goal_diff,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
        }


@dataclass
class Match:
    """A fixture between two teams; goals stay ``None`` until it is played."""

    id: int
    name_home: str
    name_away: str
    home_team_id: int
    away_team_id: int
    home_goals: int | None = None
    away_goals: int | None = None
    week: int = 0
    played: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the match in its JSON form."""
        return {
            "id": self.id,
            "name_home": self.name_home,
            "name_away": self.name_away,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
            "week": self.week,
            "played": self.played,
        }


@dataclass
class WeeklyResult:
    """The standings after a given week has been played."""

    week: int
    standings: list[Team] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the result in its JSON form."""
        return {
            "week": self.week,
            "standings": [team.to_dict() for team in self.standings],
        }