"""
Current player/team selection for the ScoreSnap scorebook application.

The selection survives restarts through the preferences store. When the
remembered player or team no longer exists, the first player (by display
order) and that player's first team are used instead. When the store is
reset the selection is moved onto the reloaded copies of the same records.
"""
import logging
from typing import Optional

from ..models import Player, Team
from ..utils.constants import HAS_COMPLETED_SETUP_KEY, LAST_VIEWED_PLAYER_KEY, LAST_VIEWED_TEAM_KEY
from .persistence_service import ObjectStore, PreferencesStore

logger = logging.getLogger(__name__)


class AppContext:
    """
    Tracks which player and team the user is looking at.

    Changes to the selection are made under the store lock.

    Args:
        store: Object store holding the players and teams
        preferences: Where the last viewed ids are remembered
    """

    def __init__(self, store: ObjectStore, preferences: Optional[PreferencesStore] = None):
        self.store = store
        self.preferences = preferences or PreferencesStore()
        self._current_player: Optional[Player] = None
        self._current_team: Optional[Team] = None
        self.load_persisted_context()
        store.add_reset_listener(self._reselect)

    # ---- selection properties ----

    @property
    def current_player(self) -> Optional[Player]:
        return self._current_player

    @current_player.setter
    def current_player(self, player: Optional[Player]) -> None:
        with self.store.lock:
            self._current_player = player
            if player is not None:
                self.preferences.set(LAST_VIEWED_PLAYER_KEY, str(player.id))

    @property
    def current_team(self) -> Optional[Team]:
        return self._current_team

    @current_team.setter
    def current_team(self, team: Optional[Team]) -> None:
        with self.store.lock:
            self._current_team = team
            if team is not None:
                self.preferences.set(LAST_VIEWED_TEAM_KEY, str(team.id))

    # ---- loading ----

    def load_persisted_context(self) -> None:
        """Restore the last viewed player and team, falling back to the first ones."""
        self._restore(
            self.preferences.get(LAST_VIEWED_PLAYER_KEY),
            self.preferences.get(LAST_VIEWED_TEAM_KEY),
        )

    def _reselect(self) -> None:
        player, team = self._current_player, self._current_team
        self._restore(player.id if player else None, team.id if team else None)

    def _restore(self, player_id, team_id) -> None:
        with self.store.lock:
            player = self.store.get(Player, player_id) if player_id else None
            if player is None:
                player = self.first_player()
            self._current_player = player

            team = None
            if player is not None:
                if team_id:
                    candidate = self.store.get(Team, team_id)
                    if candidate is not None and candidate.player is player:
                        team = candidate
                if team is None:
                    team = self.first_team(player)
            self._current_team = team
        logger.debug(
            "Restored context player=%s team=%s",
            player.id if player else None, team.id if team else None,
        )

    def first_player(self) -> Optional[Player]:
        players = self.store.players_array
        return players[0] if players else None

    @staticmethod
    def first_team(player: Player) -> Optional[Team]:
        teams = player.teams_array
        return teams[0] if teams else None

    # ---- switching ----

    def switch_to_player(self, player: Player) -> None:
        """Select a player and default to that player's first team."""
        with self.store.lock:
            self.current_player = player
            self.current_team = self.first_team(player)

    def switch_to_team(self, team: Team) -> bool:
        """
        Select a team of the current player.

        Returns:
            False if the team belongs to another player (selection unchanged)
        """
        with self.store.lock:
            if team.player is None or team.player is not self.current_player:
                return False
            self.current_team = team
            return True

    def switch_to_player_and_team(self, player: Player, team: Team) -> None:
        with self.store.lock:
            self.current_player = player
            if team.player is player:
                self.current_team = team
            else:
                self.current_team = self.first_team(player)

    # ---- deletions ----

    def handle_player_deletion(self, deleted_player: Player) -> None:
        """Move the selection off a player that has just been deleted."""
        with self.store.lock:
            if self.current_player is not deleted_player:
                return
            player = self.first_player()
            self._current_player = None
            self._current_team = None
            if player is None:
                self.preferences.remove(LAST_VIEWED_PLAYER_KEY)
                self.preferences.remove(LAST_VIEWED_TEAM_KEY)
                return
            self.switch_to_player(player)

    def handle_team_deletion(self, deleted_team: Team) -> None:
        """Move the selection off a team that has just been deleted."""
        with self.store.lock:
            if self.current_team is not deleted_team:
                return
            self._current_team = None
            if self.current_player is not None:
                team = self.first_team(self.current_player)
                if team is not None:
                    self.current_team = team
                    return
            self.preferences.remove(LAST_VIEWED_TEAM_KEY)

    # ---- setup ----

    @property
    def needs_setup(self) -> bool:
        """True until the store holds a player to select."""
        return self.current_player is None

    @property
    def setup_completed(self) -> bool:
        """Whether the first-run setup has been finished at some point."""
        return bool(self.preferences.get(HAS_COMPLETED_SETUP_KEY, False))

    def complete_setup(self, player: Player, team: Team) -> None:
        with self.store.lock:
            self.current_player = player
            self.current_team = team
            self.preferences.set(HAS_COMPLETED_SETUP_KEY, True)
