"""
Roster service for the ScoreSnap scorebook application.

This module provides business logic for managing players and their teams:
validation, creation, editing, reordering and cascade-aware deletion. Every
operation commits through the store it was given.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from ..models import Player, Team
from ..utils import DEFAULT_PLAYER_COLOR, DEFAULT_SPORT, DEFAULT_TEAM_COLOR
from .persistence_service import ObjectStore
from .validation import DuplicateNameError, ValidationError, color_errors, name_errors

logger = logging.getLogger(__name__)


class RosterService:
    """
    Service class for managing players and teams.

    Args:
        store: Object store the players and teams live in
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    # ==================== Lookups ==================== #

    def players_array(self) -> List[Player]:
        return self.store.players_array

    def get_player(self, player_id) -> Player:
        """
        Raises:
            RecordNotFoundError: If there is no such player
        """
        return self.store.require(Player, player_id)

    def get_team(self, team_id) -> Team:
        """
        Raises:
            RecordNotFoundError: If there is no such team
        """
        return self.store.require(Team, team_id)

    def teams_for_player(self, player_id) -> List[Team]:
        return self.get_player(player_id).teams_array

    # ==================== Validation ==================== #

    def is_player_name_unique(self, name: str, excluding: Optional[Player] = None) -> bool:
        wanted = name.strip().lower()
        return not any(
            p is not excluding and (p.name or "").strip().lower() == wanted
            for p in self.store.players_array
        )

    def is_team_name_unique(self, name: str, player: Player, excluding: Optional[Team] = None) -> bool:
        wanted = name.strip().lower()
        return not any(
            t is not excluding and (t.name or "").strip().lower() == wanted
            for t in player.teams
        )

    def validate_player_data(
        self,
        name: Optional[str],
        player_color: Optional[str] = None,
    ) -> List[str]:
        """
        Validate player fields and return list of validation errors.

        Args:
            name: Proposed player name
            player_color: Proposed color tag

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = name_errors("Player name", name)
        errors.extend(color_errors("player color", player_color))
        return errors

    def validate_team_data(self, name: Optional[str], team_color: Optional[str] = None) -> List[str]:
        errors = name_errors("Team name", name)
        errors.extend(color_errors("team color", team_color))
        return errors

    def _check_player(self, name, player_color, excluding=None) -> None:
        errors = self.validate_player_data(name, player_color)
        if errors:
            logger.info("Rejected player data: %s", "; ".join(errors))
            raise ValidationError(errors)
        if not self.is_player_name_unique(name, excluding):
            raise DuplicateNameError([f"Player '{name.strip()}' already exists"])

    def _check_team(self, player, name, team_color, excluding=None) -> None:
        errors = self.validate_team_data(name, team_color)
        if errors:
            logger.info("Rejected team data: %s", "; ".join(errors))
            raise ValidationError(errors)
        if not self.is_team_name_unique(name, player, excluding):
            raise DuplicateNameError([f"Team '{name.strip()}' already exists for {player.name}"])

    # ==================== Players ==================== #

    def create_player(
        self,
        name: str,
        player_color: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> Player:
        """
        Create and save a new player, placed last in the player list.

        Raises:
            ValidationError: If the data is invalid
            DuplicateNameError: If another player has the same name
            CommitError: If the player could not be saved
        """
        with self.store.lock:
            self._check_player(name, player_color)
            player = self.store.new_player(
                name.strip(),
                player_color=player_color or DEFAULT_PLAYER_COLOR,
                sport=sport or DEFAULT_SPORT,
            )
            self.store.save_or_rollback()
            logger.info("Created player %s (%s)", player.name, player.id)
            return player

    def update_player(
        self,
        player_id,
        name: Optional[str] = None,
        player_color: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> Player:
        """
        Edit a player in place; fields left as None are unchanged.

        Raises:
            RecordNotFoundError: If there is no such player
            ValidationError: If the new data is invalid
            CommitError: If the change could not be saved
        """
        with self.store.lock:
            player = self.get_player(player_id)
            new_name = player.name if name is None else name
            self._check_player(new_name, player_color, excluding=player)
            player.name = new_name.strip()
            if player_color is not None:
                player.player_color = player_color
            if sport is not None:
                player.sport = sport
            self.store.save_or_rollback()
            return player

    def delete_player(self, player_id) -> Player:
        """
        Delete a player together with all of its teams and games.

        Returns:
            The deleted player

        Raises:
            RecordNotFoundError: If there is no such player
            CommitError: If the deletion could not be saved
        """
        with self.store.lock:
            player = self.get_player(player_id)
            self.store.delete(player)
            self.store.save_or_rollback()
            return player

    def move_players(self, from_indices: Iterable[int], to_index: int) -> List[Player]:
        """
        Reorder the player list.

        Raises:
            IndexError: If an offset is out of range
        """
        with self.store.lock:
            self.store.reorder_players(from_indices, to_index)
            self.store.save_or_rollback()
            return self.store.players_array

    # ==================== Teams ==================== #

    def create_team(
        self,
        player_id,
        name: str,
        team_color: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> Team:
        """
        Create and save a new team under a player.

        Raises:
            RecordNotFoundError: If there is no such player
            ValidationError: If the data is invalid
            DuplicateNameError: If the player already has a team with that name
            CommitError: If the team could not be saved
        """
        with self.store.lock:
            player = self.get_player(player_id)
            self._check_team(player, name, team_color)
            team = self.store.new_team(
                player,
                name.strip(),
                team_color=team_color or DEFAULT_TEAM_COLOR,
                sport=sport,
            )
            self.store.save_or_rollback()
            logger.info("Created team %s for player %s", team.name, player.name)
            return team

    def create_player_and_team(
        self,
        player_name: str,
        team_name: str,
        team_color: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> Tuple[Player, Team]:
        """
        Create a player and its first team in one commit, as first-run setup does.

        Raises:
            ValidationError: If either name or the color is invalid
            DuplicateNameError: If another player has the same name
            CommitError: If the records could not be saved
        """
        with self.store.lock:
            errors = self.validate_player_data(player_name)
            errors.extend(self.validate_team_data(team_name, team_color))
            if errors:
                logger.info("Rejected setup data: %s", "; ".join(errors))
                raise ValidationError(errors)
            self._check_player(player_name, None)
            player = self.store.new_player(
                player_name.strip(),
                player_color=DEFAULT_PLAYER_COLOR,
                sport=sport or DEFAULT_SPORT,
            )
            team = self.store.new_team(
                player,
                team_name.strip(),
                team_color=team_color or DEFAULT_TEAM_COLOR,
            )
            self.store.save_or_rollback()
            logger.info("Set up player %s with team %s", player.name, team.name)
            return player, team

    def update_team(
        self,
        team_id,
        name: Optional[str] = None,
        team_color: Optional[str] = None,
        sport: Optional[str] = None,
    ) -> Team:
        """Edit a team in place; fields left as None are unchanged."""
        with self.store.lock:
            team = self.get_team(team_id)
            new_name = team.name if name is None else name
            self._check_team(team.player, new_name, team_color, excluding=team)
            team.name = new_name.strip()
            if team_color is not None:
                team.team_color = team_color
            if sport is not None:
                team.sport = sport
            self.store.save_or_rollback()
            return team

    def delete_team(self, team_id) -> Team:
        """
        Delete a team and its games; the player's remaining teams are renumbered.

        Returns:
            The deleted team
        """
        with self.store.lock:
            team = self.get_team(team_id)
            self.store.delete(team)
            self.store.save_or_rollback()
            return team

    def move_teams(self, player_id, from_indices: Iterable[int], to_index: int) -> List[Team]:
        """
        Reorder a player's teams.

        Raises:
            RecordNotFoundError: If there is no such player
            IndexError: If an offset is out of range
        """
        with self.store.lock:
            player = self.get_player(player_id)
            player.reorder_teams(from_indices, to_index)
            self.store.save_or_rollback()
            return self.teams_for_player(player_id)
