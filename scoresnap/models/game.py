"""
Game model for the ScoreSnap scorebook application.

This module contains the Game dataclass which represents a single game played
by a team, including scores, opponent details and an optional scoreboard image.
The win/loss/tie result is always derived from the two scores and is never
stored.
"""
import base64
import logging
import weakref
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID, uuid4

from ..utils import fmt_medium_date, now, parse_date, parse_time, parse_datetime
from ..utils.constants import NO_DATE_TEXT, RESULT_LOSS, RESULT_TIE, RESULT_WIN

if TYPE_CHECKING:
    from .team import Team

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Game:
    """
    Represents one game played by a team.

    Attributes:
        opponent_name: Name of the opposing team
        team_score: Points scored by the owning team
        opponent_score: Points scored by the opponent
        game_date: Day the game was played
        game_time: Tip-off time
        location: Where the game was played
        notes: Free-text notes
        scoreboard_image: Raw image bytes of the scoreboard photo
        last_modified: When the game record was last edited
        display_order: Position among the owning team's games
        id: Unique identifier
        team_id: Identifier of the owning team (None while detached)
    """
    opponent_name: Optional[str] = None
    team_score: int = 0
    opponent_score: int = 0
    game_date: Optional[date] = None
    game_time: Optional[time] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    scoreboard_image: Optional[bytes] = None
    last_modified: Optional[datetime] = None
    display_order: int = 0
    id: UUID = field(default_factory=uuid4)
    team_id: Optional[UUID] = None
    # Weak link to the owning team; the team's games list owns the game.
    _team_ref: Optional["weakref.ReferenceType[Team]"] = field(
        default=None, init=False, repr=False
    )

    @property
    def team(self) -> Optional["Team"]:
        """The owning team, or None if the game is detached."""
        if self._team_ref is None:
            return None
        return self._team_ref()

    # ---- derived result ----

    @property
    def is_win(self) -> bool:
        return self.team_score > self.opponent_score

    @property
    def is_loss(self) -> bool:
        return self.team_score < self.opponent_score

    @property
    def is_tie(self) -> bool:
        return self.team_score == self.opponent_score

    @property
    def game_result(self) -> str:
        """Single-letter result code: "W", "L" or "T"."""
        if self.is_win:
            return "W"
        if self.is_loss:
            return "L"
        return "T"

    @property
    def result_text(self) -> str:
        if self.is_win:
            return RESULT_WIN
        if self.is_loss:
            return RESULT_LOSS
        return RESULT_TIE

    @property
    def score_display(self) -> str:
        return f"{self.team_score}-{self.opponent_score}"

    @property
    def date_display(self) -> str:
        if self.game_date is None:
            return NO_DATE_TEXT
        return fmt_medium_date(self.game_date)

    @property
    def summary(self) -> str:
        """One-line summary such as "Win vs Lakers (72-65)"."""
        opponent = self.opponent_name or "Unknown"
        return f"{self.result_text} vs {opponent} ({self.score_display})"

    # ---- validation ----

    def validate(self) -> bool:
        """
        Check the fields required before the game may be saved.

        Returns:
            False if the date or opponent name is missing or a score is negative
        """
        if self.game_date is None or self.opponent_name is None:
            return False
        return self.team_score >= 0 and self.opponent_score >= 0

    # ---- scoreboard image ----

    def set_scoreboard_image(self, image_data: Optional[bytes]) -> None:
        """
        Replace the scoreboard image.

        Args:
            image_data: Raw image bytes, or None to remove the image
        """
        self.scoreboard_image = image_data
        self.touch()

    def clear_scoreboard_image(self) -> None:
        """Remove the scoreboard image."""
        self.scoreboard_image = None
        self.touch()

    def touch(self) -> None:
        """Update the last-modified timestamp."""
        self.last_modified = now()

    # ---- ownership ----

    def set_team(self, team: Optional["Team"]) -> None:
        """
        Move this game to another team.

        The game is removed from its current team before being added to the
        new one, so it is never listed under two teams at once.

        Args:
            team: New owning team, or None to only detach
        """
        old_team = self.team
        if old_team is team:
            return
        if old_team is not None:
            old_team.remove_game(self)
        if team is not None:
            team.add_game(self)

    def _attach(self, team: "Team") -> None:
        self._team_ref = weakref.ref(team)
        self.team_id = team.id

    def _detach(self) -> None:
        self._team_ref = None
        self.team_id = None

    # ---- serialization ----

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert game to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the game
        """
        return {
            "id": str(self.id),
            "team_id": str(self.team_id) if self.team_id else None,
            "opponent_name": self.opponent_name,
            "team_score": self.team_score,
            "opponent_score": self.opponent_score,
            "game_date": self.game_date.isoformat() if self.game_date else None,
            "game_time": self.game_time.isoformat() if self.game_time else None,
            "location": self.location,
            "notes": self.notes,
            "scoreboard_image": (
                base64.b64encode(self.scoreboard_image).decode("ascii")
                if self.scoreboard_image is not None else None
            ),
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "display_order": self.display_order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        """
        Create game from dictionary for JSON deserialization.

        The owning team is not restored here; ``Team.from_dict`` attaches
        its games.

        Args:
            data: Dictionary representation of game

        Returns:
            Game instance
        """
        image = data.get("scoreboard_image")
        game = cls(
            opponent_name=data.get("opponent_name"),
            team_score=int(data.get("team_score", 0)),
            opponent_score=int(data.get("opponent_score", 0)),
            game_date=parse_date(data.get("game_date")),
            game_time=parse_time(data.get("game_time")),
            location=data.get("location"),
            notes=data.get("notes"),
            scoreboard_image=base64.b64decode(image) if image is not None else None,
            last_modified=parse_datetime(data.get("last_modified")),
            display_order=int(data.get("display_order", 0)),
        )
        if data.get("id"):
            game.id = UUID(data["id"])

        # Older data stored the result flags next to the scores
        if "is_win" in data or "is_tie" in data:
            stored = (bool(data.get("is_win")), bool(data.get("is_tie")))
            if stored != (game.is_win, game.is_tie):
                logger.warning(
                    "Ignoring stored result flags for game %s: is_win=%r is_tie=%r disagree with score %s",
                    game.id, data.get("is_win"), data.get("is_tie"), game.score_display,
                )
        return game
