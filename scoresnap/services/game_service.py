"""
Game service for the ScoreSnap scorebook application.

This module provides business logic for recording games, editing scores,
moving games between teams, managing scoreboard images and summarizing a
team's record.
"""
import logging
from datetime import date, time
from typing import Any, Dict, List, Optional

from ..models import Game, Team
from ..utils import now
from .persistence_service import ObjectStore
from .validation import ValidationError, game_field_errors

logger = logging.getLogger(__name__)

EDITABLE_GAME_FIELDS = (
    "opponent_name", "team_score", "opponent_score", "game_date",
    "game_time", "location", "notes",
)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class GameService:
    """
    Service class for managing games.

    Args:
        store: Object store the games live in
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    def get_game(self, game_id) -> Game:
        """
        Raises:
            RecordNotFoundError: If there is no such game
        """
        return self.store.require(Game, game_id)

    def get_team(self, team_id) -> Team:
        return self.store.require(Team, team_id)

    def validate_game_data(
        self,
        opponent_name: Optional[str],
        team_score: Any,
        opponent_score: Any,
        game_date: Optional[date],
    ) -> List[str]:
        """
        Validate game details and return list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        return game_field_errors(opponent_name, team_score, opponent_score, game_date)

    def record_game(
        self,
        team_id,
        opponent_name: str,
        team_score: int,
        opponent_score: int,
        game_date: Optional[date] = None,
        game_time: Optional[time] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        scoreboard_image: Optional[bytes] = None,
    ) -> Game:
        """
        Record a new game for a team.

        Args:
            team_id: Owning team
            opponent_name: Opponent's name
            team_score: Points scored by the team
            opponent_score: Points scored by the opponent
            game_date: Day of the game (defaults to today)
            game_time: Start time (defaults to now)
            location: Where the game was played
            notes: Free-text notes
            scoreboard_image: Optional scoreboard photo bytes

        Returns:
            The saved game

        Raises:
            RecordNotFoundError: If there is no such team
            ValidationError: If the game details are invalid
            CommitError: If the game could not be saved
        """
        current = now()
        if game_date is None:
            game_date = current.date()
        if game_time is None:
            game_time = current.time().replace(microsecond=0)

        with self.store.lock:
            team = self.get_team(team_id)
            errors = self.validate_game_data(opponent_name, team_score, opponent_score, game_date)
            if errors:
                logger.info("Rejected game for team %s: %s", team.id, "; ".join(errors))
                raise ValidationError(errors)
            game = self.store.new_game(
                team,
                opponent_name=opponent_name.strip(),
                team_score=team_score,
                opponent_score=opponent_score,
                game_date=game_date,
                game_time=game_time,
                location=_blank_to_none(location),
                notes=_blank_to_none(notes),
                scoreboard_image=scoreboard_image,
            )
            self.store.save_or_rollback()
            logger.info("Recorded game %s for team %s: %s", game.id, team.name, game.summary)
            return game

    def update_game(self, game_id, **changes: Any) -> Game:
        """
        Edit a game's details in place.

        Args:
            game_id: Game to edit
            **changes: New values for any of EDITABLE_GAME_FIELDS

        Raises:
            RecordNotFoundError: If there is no such game
            ValidationError: If a field is unknown or the result is invalid
            CommitError: If the change could not be saved
        """
        unknown = sorted(set(changes) - set(EDITABLE_GAME_FIELDS))
        if unknown:
            raise ValidationError([f"Unknown game field: {name}" for name in unknown])

        with self.store.lock:
            game = self.get_game(game_id)
            merged = {name: getattr(game, name) for name in EDITABLE_GAME_FIELDS}
            merged.update(changes)
            errors = self.validate_game_data(
                merged["opponent_name"], merged["team_score"],
                merged["opponent_score"], merged["game_date"],
            )
            if errors:
                raise ValidationError(errors)

            merged["opponent_name"] = merged["opponent_name"].strip()
            merged["location"] = _blank_to_none(merged["location"])
            merged["notes"] = _blank_to_none(merged["notes"])
            for name, value in merged.items():
                setattr(game, name, value)
            game.touch()
            self.store.save_or_rollback()
            return game

    def delete_game(self, game_id) -> Game:
        """Delete a game; the team's remaining games are renumbered."""
        with self.store.lock:
            game = self.get_game(game_id)
            self.store.delete(game)
            self.store.save_or_rollback()
            return game

    def move_game(self, game_id, team_id) -> Game:
        """
        Move a game to another team.

        Raises:
            RecordNotFoundError: If the game or team does not exist
            CommitError: If the change could not be saved
        """
        with self.store.lock:
            game = self.get_game(game_id)
            new_team = self.get_team(team_id)
            old_team = game.team
            game.set_team(new_team)
            game.touch()
            self.store.save_or_rollback()
            logger.info(
                "Moved game %s from team %s to team %s",
                game.id, old_team.id if old_team else None, new_team.id,
            )
            return game

    def attach_scoreboard(self, game_id, image_data: bytes) -> Game:
        """
        Store a scoreboard photo on a game.

        Raises:
            ValidationError: If the image is empty
        """
        if not image_data:
            raise ValidationError(["Scoreboard image is empty"])
        with self.store.lock:
            game = self.get_game(game_id)
            game.set_scoreboard_image(bytes(image_data))
            self.store.save_or_rollback()
            return game

    def clear_scoreboard(self, game_id) -> Game:
        with self.store.lock:
            game = self.get_game(game_id)
            game.clear_scoreboard_image()
            self.store.save_or_rollback()
            return game

    def team_summary(self, team_id) -> Dict[str, Any]:
        """
        Get a summary of a team's record.

        Returns:
            Dictionary with the record, scoring figures and recent games
        """
        with self.store.lock:
            team = self.get_team(team_id)
            return {
                "team_id": str(team.id),
                "name": team.name,
                "games_played": len(team.games),
                "wins": team.wins,
                "losses": team.losses,
                "ties": team.ties,
                "record": team.record_display,
                "average_score": round(team.average_score, 1),
                "point_differential": team.point_differential,
                "recent_games": [game_view(g) for g in team.recent_games],
            }


def game_view(game: Game) -> Dict[str, Any]:
    """Game fields plus the derived display values, without the image bytes."""
    data = game.to_dict()
    data.pop("scoreboard_image")
    data.update({
        "has_scoreboard_image": game.scoreboard_image is not None,
        "result": game.game_result,
        "result_text": game.result_text,
        "score_display": game.score_display,
        "date_display": game.date_display,
        "summary": game.summary,
    })
    return data
