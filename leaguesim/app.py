"""HTTP interface for the league: standings, fixtures and season simulation."""

from __future__ import annotations

import argparse
import sqlite3
from typing import Any

from flask import Flask, jsonify, request

from .models import WeeklyResult
from .services import (
    LeagueError,
    MatchService,
    SeasonEndedError,
    TeamService,
    connect,
)
from .update_match import update_match_result

_FAILURES = (sqlite3.Error, LeagueError)
_CHANGE_FIELDS = ("match_id", "home_goals", "away_goals")


def play_all(
    team_service: TeamService, match_service: MatchService
) -> tuple[list[WeeklyResult], dict[int, Any]]:
    """Play every remaining week of the season.

    Returns the standings after each week and, per week, the championship
    probabilities (or the message explaining why there are none). Errors
    other than the end of the season are raised.
    """
    results: list[WeeklyResult] = []
    week_probabilities: dict[int, Any] = {}
    while True:
        try:
            week, standings = match_service.play_week()
        except SeasonEndedError:
            break
        results.append(WeeklyResult(week=week, standings=standings))
        week_probabilities[week] = match_service.probabilities_message(week)
    return results, week_probabilities


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _parse_change_request(payload: Any) -> dict[str, int] | None:
    if not isinstance(payload, dict):
        return None
    parsed: dict[str, int] = {}
    for name in _CHANGE_FIELDS:
        value = payload.get(name)
        if value is None:
            value = 0
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        parsed[name] = value
    return parsed


def create_app(team_service: TeamService, match_service: MatchService) -> Flask:
    """Build the web application serving the league endpoints."""
    app = Flask(__name__)

    @app.get("/teams")
    def teams():
        try:
            found = team_service.get_teams()
        except _FAILURES as exc:
            return _error(str(exc), 500)
        return jsonify([team.to_dict() for team in found])

    @app.get("/matches")
    def matches():
        try:
            found = match_service.get_matches()
        except _FAILURES as exc:
            return _error(str(exc), 500)
        return jsonify([match.to_dict() for match in found])

    @app.post("/play-week")
    def play_week():
        try:
            week, standings = match_service.play_week()
        except _FAILURES as exc:
            return _error(str(exc), 200)
        probabilities = match_service.probabilities_message(week)
        return jsonify(
            {
                "message": f"Week {week} played successfully",
                "standings": [team.to_dict() for team in standings],
                "championship_probabilities": probabilities,
            }
        )

    @app.post("/play-all")
    def play_all_weeks():
        try:
            results, probabilities = play_all(team_service, match_service)
        except _FAILURES as exc:
            return _error(str(exc), 500)
        return jsonify(
            {
                "message": "All matches played successfully",
                "weeks": [result.to_dict() for result in results],
                "championship_probabilities": probabilities,
            }
        )

    @app.post("/change-match-result")
    def change_match_result():
        req = _parse_change_request(request.get_json(silent=True))
        if req is None:
            return _error("Invalid request", 400)
        try:
            standings, probabilities = update_match_result(
                match_service.db,
                team_service,
                match_service,
                req["match_id"],
                req["home_goals"],
                req["away_goals"],
            )
        except _FAILURES as exc:
            return _error(str(exc), 500)
        return jsonify(
            {
                "message": "Match result updated successfully",
                "standings": [team.to_dict() for team in standings],
                "championship_probabilities": probabilities,
            }
        )

    @app.post("/reset-teams")
    def reset_teams():
        try:
            team_service.reset_teams()
        except _FAILURES as exc:
            return _error(f"Failed to reset teams: {exc}", 500)
        return jsonify({"message": "Teams reset successfully"})

    @app.post("/reset-matches")
    def reset_matches():
        try:
            match_service.reset_matches()
        except _FAILURES as exc:
            return _error(f"Failed to reset matches: {exc}", 500)
        return jsonify({"message": "Matches reset successfully"})

    return app


def main(argv: list[str] | None = None) -> int:
    """Open the league database and serve the HTTP interface."""
    parser = argparse.ArgumentParser(
        prog="leaguesim", description="Serve the football league simulator."
    )
    parser.add_argument("--db", default="league.db", help="path to the database")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    try:
        db = connect(args.db)
    except sqlite3.Error as exc:
        parser.exit(1, f"database connection failed: {exc}\n")

    team_service = TeamService(db)
    match_service = MatchService(db, team_service)
    app = create_app(team_service, match_service)
    app.run(host=args.host, port=args.port)
    return 0