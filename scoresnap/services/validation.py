"""
Validation rules for the ScoreSnap scorebook application.

Two layers of checks live here. ``graph_errors`` is the gate the store runs
before every commit and only enforces what the models require. The
``*_field_errors`` helpers hold the stricter rules the services apply to user
input (length limits, known colors, reasonable scores).
"""
from datetime import date
from typing import Iterable, List, Optional

from ..models import Game, Player
from ..utils import MAX_NAME_LENGTH, MAX_REASONABLE_SCORE, MIN_SCORE, TeamColor


class ValidationError(Exception):
    """Raised when data fails validation; nothing has been changed."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class DuplicateNameError(ValidationError):
    """Raised when a player or team name is already taken."""
    pass


def name_errors(label: str, name: Optional[str]) -> List[str]:
    """
    Check a display name.

    Args:
        label: Prefix for error messages (e.g. "Player name")
        name: Name to check

    Returns:
        List of validation error messages (empty if valid)
    """
    if not isinstance(name, str) or not name.strip():
        return [f"{label} is required"]
    if len(name.strip()) > MAX_NAME_LENGTH:
        return [f"{label} must be between 1 and {MAX_NAME_LENGTH} characters"]
    return []


def color_errors(label: str, color: Optional[str]) -> List[str]:
    if color is None or (isinstance(color, str) and TeamColor.is_valid(color)):
        return []
    return [f"Unknown {label} '{color}'"]


def score_errors(label: str, score) -> List[str]:
    if isinstance(score, bool) or not isinstance(score, int):
        return [f"{label} must be a whole number"]
    if not MIN_SCORE <= score <= MAX_REASONABLE_SCORE:
        return [f"{label} must be between {MIN_SCORE} and {MAX_REASONABLE_SCORE}"]
    return []


def game_field_errors(
    opponent_name: Optional[str],
    team_score,
    opponent_score,
    game_date: Optional[date],
) -> List[str]:
    """
    Check user-entered game details.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = name_errors("Opponent name", opponent_name)
    errors.extend(score_errors("Team score", team_score))
    errors.extend(score_errors("Opponent score", opponent_score))
    if game_date is None:
        errors.append("Game date is required")
    return errors


def game_errors(game: Game) -> List[str]:
    if game.validate():
        return []
    return [f"Game {game.id} needs a date, an opponent and non-negative scores"]


def graph_errors(players: Iterable[Player]) -> List[str]:
    """
    Collect the errors that would block a commit.

    Args:
        players: Every player in the store, with their teams and games

    Returns:
        List of validation error messages (empty if the graph may be saved)
    """
    errors = []
    for player in players:
        if not player.validate_name():
            errors.append(f"Player {player.id} has no name")
        for team in player.teams:
            if not team.validate_name():
                errors.append(f"Team {team.id} has no name")
            for game in team.games:
                errors.extend(game_errors(game))
    return errors
