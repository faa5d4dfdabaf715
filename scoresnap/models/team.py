"""
Team model for the ScoreSnap scorebook application.

This module contains the Team dataclass. A team owns its games and derives its
record, averages and recent form from them on every read.
"""
import weakref
from dataclasses import dataclass, field
from datetime import date, time
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from .game import Game
from ..utils import DEFAULT_SPORT, DEFAULT_TEAM_COLOR, RECENT_GAMES_LIMIT, move_offsets, renumber

if TYPE_CHECKING:
    from .player import Player


@dataclass(eq=False)
class Team:
    """
    Represents a team a player belongs to, together with its games.

    Attributes:
        name: Team name
        team_color: Color tag used to label the team
        sport: Sport the team plays
        display_order: Position among the owning player's teams
        id: Unique identifier
        player_id: Identifier of the owning player (None while detached)
        games: Games owned by this team, kept in display order
    """
    name: Optional[str] = None
    team_color: str = DEFAULT_TEAM_COLOR
    sport: str = DEFAULT_SPORT
    display_order: int = 0
    id: UUID = field(default_factory=uuid4)
    player_id: Optional[UUID] = None
    games: List[Game] = field(default_factory=list)
    _player_ref: Optional["weakref.ReferenceType[Player]"] = field(
        default=None, init=False, repr=False
    )

    @property
    def player(self) -> Optional["Player"]:
        """The owning player, or None if the team is detached."""
        if self._player_ref is None:
            return None
        return self._player_ref()

    def _attach(self, player: "Player") -> None:
        self._player_ref = weakref.ref(player)
        self.player_id = player.id

    def _detach(self) -> None:
        self._player_ref = None
        self.player_id = None

    # ---- record ----

    @property
    def wins(self) -> int:
        return sum(1 for g in self.games if g.is_win)

    @property
    def losses(self) -> int:
        return sum(1 for g in self.games if not g.is_win and not g.is_tie)

    @property
    def ties(self) -> int:
        return sum(1 for g in self.games if g.is_tie)

    @property
    def record_display(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    @property
    def average_score(self) -> float:
        if not self.games:
            return 0.0
        return sum(g.team_score for g in self.games) / len(self.games)

    @property
    def point_differential(self) -> int:
        return sum(g.team_score - g.opponent_score for g in self.games)

    # ---- game listings ----

    @property
    def games_array(self) -> List[Game]:
        """Games newest first; games without a date come last."""
        return sorted(
            self.games,
            key=lambda g: (g.game_date is not None, g.game_date or date.min, g.game_time or time.min),
            reverse=True,
        )

    @property
    def recent_games(self) -> List[Game]:
        return self.games_array[:RECENT_GAMES_LIMIT]

    @property
    def ordered_games(self) -> List[Game]:
        """Games in display order."""
        return sorted(self.games, key=lambda g: g.display_order)

    # ---- game management ----

    def add_game(self, game: Game) -> None:
        """
        Add a game to this team.

        The game is detached from any other team first and placed last in
        display order.

        Args:
            game: Game to add
        """
        if game in self.games:
            return
        current = game.team
        if current is not None and current is not self:
            current.remove_game(game)
        game._attach(self)
        game.display_order = len(self.games)
        self.games.append(game)

    def remove_game(self, game: Game) -> None:
        """
        Remove a game from this team and renumber the remaining games.

        Args:
            game: Game to remove; ignored if it is not one of this team's games
        """
        if game not in self.games:
            return
        self.games.remove(game)
        game._detach()
        self.games = self.ordered_games
        renumber(self.games)

    def reorder_games(self, from_indices: Iterable[int], to_index: int) -> None:
        """
        Move games within the display order.

        Args:
            from_indices: Offsets of the games to move
            to_index: Destination offset

        Raises:
            IndexError: If an offset is out of range
        """
        self.games = move_offsets(self.ordered_games, from_indices, to_index)
        renumber(self.games)

    def validate_name(self) -> bool:
        return bool(self.name and self.name.strip())

    # ---- serialization ----

    def to_dict(self, include_games: bool = True) -> Dict[str, Any]:
        """
        Convert team to dictionary for JSON serialization.

        Args:
            include_games: Whether to nest the team's games

        Returns:
            Dictionary representation of the team
        """
        data = {
            "id": str(self.id),
            "player_id": str(self.player_id) if self.player_id else None,
            "name": self.name,
            "team_color": self.team_color,
            "sport": self.sport,
            "display_order": self.display_order,
        }
        if include_games:
            data["games"] = [g.to_dict() for g in self.ordered_games]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """
        Create team and its games from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of team

        Returns:
            Team instance with its games attached
        """
        team = cls(
            name=data.get("name"),
            team_color=data.get("team_color") or DEFAULT_TEAM_COLOR,
            sport=data.get("sport") or DEFAULT_SPORT,
            display_order=int(data.get("display_order", 0)),
        )
        if data.get("id"):
            team.id = UUID(data["id"])
        games = [Game.from_dict(g) for g in data.get("games", [])]
        for game in sorted(games, key=lambda g: g.display_order):
            team.add_game(game)
        return team
