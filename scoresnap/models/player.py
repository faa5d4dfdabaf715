"""
Player model for the ScoreSnap scorebook application.

This module contains the Player dataclass, the root of the ownership tree.
A player owns its teams, which in turn own their games.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from .team import Team
from ..utils import DEFAULT_PLAYER_COLOR, DEFAULT_SPORT, move_offsets, renumber


@dataclass(eq=False)
class Player:
    """
    Represents a player whose teams and games are being tracked.

    Attributes:
        name: Player's name
        player_color: Color tag used to label the player
        sport: Sport the player plays
        display_order: Position in the player list
        id: Unique identifier
        teams: Teams owned by this player, kept in display order
    """
    name: Optional[str] = None
    player_color: str = DEFAULT_PLAYER_COLOR
    sport: str = DEFAULT_SPORT
    display_order: int = 0
    id: UUID = field(default_factory=uuid4)
    teams: List[Team] = field(default_factory=list)

    @property
    def teams_array(self) -> List[Team]:
        """Teams sorted by display order."""
        return sorted(self.teams, key=lambda t: t.display_order)

    @property
    def games(self) -> List:
        """Every game of every team, in team display order."""
        return [g for team in self.teams_array for g in team.ordered_games]

    def add_team(self, team: Team) -> None:
        """
        Add a team to this player, placing it last in display order.

        A team owned by another player is removed from that player first.

        Args:
            team: Team to add
        """
        if team in self.teams:
            return
        current = team.player
        if current is not None and current is not self:
            current.remove_team(team)
        team._attach(self)
        team.display_order = len(self.teams)
        self.teams.append(team)

    def remove_team(self, team: Team) -> None:
        """
        Remove a team and renumber the remaining teams from zero.

        Args:
            team: Team to remove; ignored if it is not one of this player's teams
        """
        if team not in self.teams:
            return
        self.teams.remove(team)
        team._detach()
        self.teams = self.teams_array
        renumber(self.teams)

    def reorder_teams(self, from_indices: Iterable[int], to_index: int) -> None:
        """
        Move teams within the display order.

        Args:
            from_indices: Offsets of the teams to move
            to_index: Destination offset in the current ordering

        Raises:
            IndexError: If an offset is out of range
        """
        self.teams = move_offsets(self.teams_array, from_indices, to_index)
        renumber(self.teams)

    def find_team(self, team_id: UUID) -> Optional[Team]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def validate_name(self) -> bool:
        """
        Check that the player has a usable name.

        Returns:
            False if the name is missing or only whitespace
        """
        if self.name is None:
            return False
        return bool(self.name.strip())

    @staticmethod
    def default_color() -> str:
        return DEFAULT_PLAYER_COLOR

    def to_dict(self, include_teams: bool = True) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Args:
            include_teams: Whether to nest teams and their games

        Returns:
            Dictionary representation of the player
        """
        data = {
            "id": str(self.id),
            "name": self.name,
            "player_color": self.player_color,
            "sport": self.sport,
            "display_order": self.display_order,
        }
        if include_teams:
            data["teams"] = [t.to_dict() for t in self.teams_array]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player, teams and games from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance with its whole aggregate attached
        """
        player = cls(
            name=data.get("name"),
            player_color=data.get("player_color") or DEFAULT_PLAYER_COLOR,
            sport=data.get("sport") or DEFAULT_SPORT,
            display_order=int(data.get("display_order", 0)),
        )
        if data.get("id"):
            player.id = UUID(data["id"])
        teams = [Team.from_dict(t) for t in data.get("teams", [])]
        for team in sorted(teams, key=lambda t: t.display_order):
            player.add_team(team)
        return player
