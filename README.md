# leaguesim

leaguesim simulates a small football league over a six-week season. Each
team has a strength rating; match results are drawn at random, weighted by
the two teams' strengths, with a larger scoring factor for the home side.
From week 4 onwards the league estimates each team's chance of winning the
title by playing out the rest of the season many times (15,000 by default).

The league is kept in an SQLite database and served over a small JSON HTTP
API built with Flask.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
leaguesim
```

Options:

| Option   | Default     | Meaning                              |
|----------|-------------|--------------------------------------|
| `--db`   | `league.db` | path to the SQLite database          |
| `--host` | `0.0.0.0`   | address to listen on                 |
| `--port` | `8080`      | port to listen on                    |

On start the `teams` and `matches` tables are created if they are missing.

## Endpoints

| Method | Path                   | What it does                                                        |
|--------|------------------------|---------------------------------------------------------------------|
| GET    | `/teams`               | All teams with their points, goals, wins, draws and losses          |
| GET    | `/matches`             | All fixtures, with scores once played (`null` before)               |
| POST   | `/play-week`           | Plays the next unplayed week and returns the new standings          |
| POST   | `/play-all`            | Plays every remaining week and returns the standings for each week  |
| POST   | `/change-match-result` | Overrides a match score and recomputes both teams' records          |
| POST   | `/reset-teams`         | Sets every team's statistics back to zero                           |
| POST   | `/reset-matches`       | Marks every match unplayed and clears its score                     |

Standings returned by `/play-week` and `/play-all` are ordered by points,
then goal difference, then goals scored. A win is worth 3 points and a draw 1.

The next week to play is the one after the highest week that has a played
match. Once week 6 has been played, `/play-week` answers with status 200 and
`{"error": "Season has ended"}`, and `/play-all` simply stops.

### Championship probabilities

`/play-week`, `/play-all` and `/change-match-result` include a
`championship_probabilities` field. For weeks 1 to 3 it holds the message
`"Not enough weeks played to calculate championship probabilities"`. From
week 4 it maps team ids to each team's chance of finishing top, as a
percentage rounded to three decimal places; ids 1 to 4 are always present.
The leader of a simulated season is decided by points, then goal difference,
then goals scored, and a full tie goes to the team listed first.

`/play-all` returns these per week, keyed by week number.

### Changing a result

```
POST /change-match-result
Content-Type: application/json

{"match_id": 3, "home_goals": 2, "away_goals": 1}
```

Missing fields count as 0. If the match had already been played, its old
result is taken off both teams' records before the new one is applied, and
the match is marked played. The probabilities returned are those for the
match's week.

- A body that is not a JSON object, or a field that is not an integer, gives
  status 400 and `{"error": "Invalid request"}`.
- An unknown `match_id` gives status 500 and `{"error": "match not found"}`.

## Using it as a library

- `leaguesim.models` — the `Team`, `Match` and `WeeklyResult` dataclasses,
  each with `to_dict()` giving its JSON form.
- `leaguesim.simulator` — `simulate_goals(expected, rng)` and
  `simulate_match(home_strength, away_strength, rng)`, which returns
  `(home_goals, away_goals)`. `rng` is optional and may be any object with
  `random()` and `randrange(stop)`, such as `random.Random(seed)`.
  `simulate_match` raises `ValueError` if both strengths are zero.
- `leaguesim.championship` — `simulate_championship_probabilities(team_service,
  match_service, current_week, simulations, rng)` runs the Monte Carlo
  estimate; `play_week_simulation`, `find_team_by_id`, `update_team_stats` and
  `find_leader` work on in-memory lists of teams and matches.
- `leaguesim.services` — `connect(path)` opens the database (in memory by
  default) and `create_schema(db)` creates its tables. `TeamService(db)` has
  `get_teams()` and `reset_teams()`. `MatchService(db, team_service, rng)` has
  `get_matches()`, `play_week()` (returning the week number and the
  standings, and raising `SeasonEndedError` once the season is over),
  `reset_matches()` and `probabilities_message(week)`. The number of
  simulated seasons is the `simulations` attribute. `SeasonEndedError` is a
  subclass of `LeagueError`.
- `leaguesim.update_match` — `update_match_result(db, team_service,
  match_service, match_id, home_goals, away_goals)` returns the teams and the
  probabilities, and raises `LeagueError` for an unknown match.
- `leaguesim.app` — `create_app(team_service, match_service)` builds the
  Flask application; `play_all(team_service, match_service)` plays out the
  season and returns the weekly results and probabilities; `main(argv)` is
  the `leaguesim` command.

```python
import random

from leaguesim.services import MatchService, TeamService, connect

db = connect()
db.executemany(
    "INSERT INTO teams (id, name, strength) VALUES (?, ?, ?)",
    [(1, "Lions", 90), (2, "Eagles", 80), (3, "Wolves", 70), (4, "Bears", 60)],
)
db.execute(
    "INSERT INTO matches (id, name_home, name_away, home_team_id, away_team_id, week) "
    "VALUES (1, 'Lions', 'Eagles', 1, 2, 1)"
)
db.commit()

teams = TeamService(db)
matches = MatchService(db, teams, random.Random(1))
week, standings = matches.play_week()
```

## What it does not do

The package does not create teams or fixtures. A new database has empty
`teams` and `matches` tables, and there is no endpoint or command to add to
them; fill them in yourself (for example with SQL, as above) before playing.
The season length is fixed at six weeks, and the probability map always
includes team ids 1 to 4, so it fits a four-team double round-robin.