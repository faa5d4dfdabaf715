"""
Persistence service for the ScoreSnap scorebook application.

This module provides the transactional object store that holds the
Player -> Team -> Game graph. Changes are made in memory and committed as a
whole to a JSON file; ``reset`` throws away uncommitted changes and reloads
what was last committed. It also provides a small key/value preferences file.
"""
import json
import logging
import os
import tempfile
import threading
import weakref
from typing import Any, Dict, Iterable, List, Optional, Type, Union
from uuid import UUID, uuid4

from ..models import Game, Player, Team
from ..utils import DEFAULT_PLAYER_COLOR, DEFAULT_SPORT, DEFAULT_TEAM_COLOR, move_offsets, now, renumber
from ..utils.constants import STORE_VERSION
from .validation import ValidationError, graph_errors

logger = logging.getLogger(__name__)

Record = Union[Player, Team, Game]

_MISSING = object()


class CommitError(Exception):
    """Raised when a batch of changes could not be written; nothing was written."""
    pass


class StoreLoadError(Exception):
    """Raised when the durable file exists but cannot be read."""
    pass


class RecordNotFoundError(LookupError):
    """Raised when no record has the requested identifier."""
    pass


def _write_json_atomic(file_path: str, data: Dict[str, Any]) -> None:
    """
    Write JSON to ``file_path`` so that readers see either the old or the new file.

    Raises:
        OSError: If the file cannot be written
        TypeError: If the data is not JSON serializable
    """
    directory = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(directory, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(prefix=".scoresnap-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def _as_uuid(value: Union[UUID, str]) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise RecordNotFoundError(f"Invalid identifier: {value!r}")


def _assign_missing_ids(players: List[Any]) -> int:
    """
    Give every stored record without an id a new one, in place.

    Returns:
        Number of ids assigned
    """
    assigned = 0

    def fill(record: Any) -> None:
        nonlocal assigned
        if isinstance(record, dict) and not record.get("id"):
            record["id"] = str(uuid4())
            assigned += 1

    for player in players:
        fill(player)
        for team in (player.get("teams") or []) if isinstance(player, dict) else []:
            fill(team)
            for game in (team.get("games") or []) if isinstance(team, dict) else []:
                fill(game)
    return assigned


class ObjectStore:
    """
    In-memory object graph with all-or-nothing commits to a JSON file.

    Every read and write takes the store's re-entrant lock, so callers that
    need several operations to happen together can hold ``store.lock``
    around them.

    Args:
        file_path: JSON file backing the store. With None the committed
            state is kept in memory only, which is what the tests use.
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        self.lock = threading.RLock()
        self._reset_listeners: List[weakref.WeakMethod] = []
        self._committed = self._read_durable()
        self._players = self._materialize(self._committed)

    # ==================== Loading ==================== #

    @staticmethod
    def _empty_payload() -> Dict[str, Any]:
        return {"version": STORE_VERSION, "saved_at": None, "players": []}

    def _read_durable(self) -> Dict[str, Any]:
        if not self.file_path or not os.path.exists(self.file_path):
            return self._empty_payload()
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreLoadError(f"Unable to read store file {self.file_path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("players"), list):
            raise StoreLoadError(f"Invalid store file format: {self.file_path}")
        if int(data.get("version", 1)) > STORE_VERSION:
            raise StoreLoadError(
                f"Store file version {data['version']} is newer than supported version {STORE_VERSION}"
            )
        assigned = _assign_missing_ids(data["players"])
        if assigned:
            logger.warning("Assigned ids to %d stored record(s) in %s", assigned, self.file_path)
            try:
                _write_json_atomic(self.file_path, data)
            except OSError as e:
                raise StoreLoadError(f"Unable to store assigned ids in {self.file_path}: {e}") from e
        return data

    @staticmethod
    def _materialize(payload: Dict[str, Any]) -> List[Player]:
        try:
            players = [Player.from_dict(p) for p in payload.get("players", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreLoadError(f"Invalid record in store: {e}") from e
        players.sort(key=lambda p: p.display_order)
        renumber(players)
        return players

    def _snapshot(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._players]

    # ==================== Queries ==================== #

    @property
    def players_array(self) -> List[Player]:
        with self.lock:
            return list(self._players)

    def all_teams(self) -> List[Team]:
        with self.lock:
            return [t for p in self._players for t in p.teams_array]

    def all_games(self) -> List[Game]:
        with self.lock:
            return [g for t in self.all_teams() for g in t.ordered_games]

    def _records(self, entity_type: Type[Record]) -> List[Record]:
        if entity_type is Player:
            return self.players_array
        if entity_type is Team:
            return self.all_teams()
        if entity_type is Game:
            return self.all_games()
        raise TypeError(f"Unsupported record type: {entity_type!r}")

    def fetch(self, entity_type: Type[Record], **attrs: Any) -> List[Record]:
        """
        Find records whose attributes equal the given values.

        Args:
            entity_type: Player, Team or Game
            **attrs: Attribute names and the values they must equal

        Returns:
            Matching records in display order (possibly empty)

        Example:
            >>> store.fetch(Player, name="Persistent Player")
        """
        with self.lock:
            return [
                record for record in self._records(entity_type)
                if all(getattr(record, key, _MISSING) == value for key, value in attrs.items())
            ]

    def get(self, entity_type: Type[Record], record_id: Union[UUID, str]) -> Optional[Record]:
        """Return the record with the given id, or None."""
        try:
            wanted = _as_uuid(record_id)
        except RecordNotFoundError:
            return None
        matches = self.fetch(entity_type, id=wanted)
        return matches[0] if matches else None

    def require(self, entity_type: Type[Record], record_id: Union[UUID, str]) -> Record:
        """
        Return the record with the given id.

        Raises:
            RecordNotFoundError: If there is no such record
        """
        record = self.get(entity_type, record_id)
        if record is None:
            raise RecordNotFoundError(f"{entity_type.__name__} not found: {record_id}")
        return record

    def contains(self, record: Record) -> bool:
        with self.lock:
            return any(r is record for r in self._records(type(record)))

    # ==================== Creation ==================== #

    def insert(self, player: Player) -> Player:
        """
        Register a player (with any teams and games it already owns).

        Args:
            player: Player to register; placed last in display order

        Returns:
            The registered player
        """
        with self.lock:
            if not any(p is player for p in self._players):
                player.display_order = len(self._players)
                self._players.append(player)
            return player

    def new_player(
        self,
        name: Optional[str],
        player_color: str = DEFAULT_PLAYER_COLOR,
        sport: str = DEFAULT_SPORT,
    ) -> Player:
        """Create and register a new player."""
        return self.insert(Player(name=name, player_color=player_color, sport=sport))

    def new_team(
        self,
        player: Player,
        name: Optional[str],
        team_color: str = DEFAULT_TEAM_COLOR,
        sport: Optional[str] = None,
    ) -> Team:
        """
        Create a team owned by ``player``.

        Raises:
            ValueError: If the player is not registered in this store
        """
        with self.lock:
            self._require_registered(player)
            team = Team(name=name, team_color=team_color, sport=sport or player.sport)
            player.add_team(team)
            return team

    def new_game(self, team: Team, **fields: Any) -> Game:
        """
        Create a game owned by ``team``.

        Args:
            team: Owning team, which must belong to a registered player
            **fields: Game attributes (opponent_name, team_score, ...)

        Raises:
            ValueError: If the team is not registered in this store
        """
        with self.lock:
            self._require_registered(team)
            game = Game(**fields)
            game.touch()
            team.add_game(game)
            return game

    def _require_registered(self, record: Record) -> None:
        if not self.contains(record):
            raise ValueError(f"{type(record).__name__} {record.id} is not registered in this store")

    # ==================== Mutation ==================== #

    def delete(self, record: Record) -> None:
        """
        Delete a record and everything it owns.

        Deleting a player removes its teams and their games; deleting a team
        removes its games. Remaining siblings are renumbered.

        Args:
            record: Player, Team or Game registered in this store
        """
        with self.lock:
            if isinstance(record, Player):
                if not any(p is record for p in self._players):
                    return
                self._players = [p for p in self._players if p is not record]
                renumber(self._players)
                logger.info(
                    "Deleted player %s with %d team(s) and %d game(s)",
                    record.id, len(record.teams), len(record.games),
                )
            elif isinstance(record, Team):
                owner = record.player
                if owner is None:
                    return
                game_count = len(record.games)
                owner.remove_team(record)
                logger.info("Deleted team %s with %d game(s)", record.id, game_count)
            elif isinstance(record, Game):
                owner = record.team
                if owner is None:
                    return
                owner.remove_game(record)
                logger.info("Deleted game %s", record.id)
            else:
                raise TypeError(f"Unsupported record type: {type(record)!r}")

    def reorder_players(self, from_indices: Iterable[int], to_index: int) -> None:
        with self.lock:
            self._players = move_offsets(self._players, from_indices, to_index)
            renumber(self._players)

    # ==================== Commit / reset ==================== #

    @property
    def has_changes(self) -> bool:
        with self.lock:
            return self._snapshot() != self._committed.get("players", [])

    def save(self) -> bool:
        """
        Commit every pending change as one unit.

        Returns:
            True if something was written, False if there was nothing to save

        Raises:
            ValidationError: If a record would be saved in an invalid state
            CommitError: If the durable write failed; the file is unchanged
        """
        with self.lock:
            snapshot = self._snapshot()
            if snapshot == self._committed.get("players", []):
                logger.debug("Nothing to commit")
                return False

            errors = graph_errors(self._players)
            if errors:
                logger.info("Commit rejected: %s", "; ".join(errors))
                raise ValidationError(errors)

            payload = {
                "version": STORE_VERSION,
                "saved_at": now().isoformat(),
                "players": snapshot,
            }
            if self.file_path:
                try:
                    _write_json_atomic(self.file_path, payload)
                except (OSError, TypeError, ValueError) as e:
                    logger.error("Commit to %s failed: %s", self.file_path, e)
                    raise CommitError(f"Unable to save changes: {e}") from e
            self._committed = payload
            logger.info("Committed %d player(s) to %s", len(snapshot), self.file_path or "memory")
            return True

    def reset(self) -> None:
        """
        Discard uncommitted changes and reload the last committed state.

        Records obtained before the reset are no longer part of the store;
        fetch them again afterwards, or register a reset listener.

        Raises:
            StoreLoadError: If the durable file can no longer be read
        """
        with self.lock:
            if self.file_path:
                self._committed = self._read_durable()
            self._players = self._materialize(self._committed)
            logger.info("Store reloaded with %d player(s)", len(self._players))
            self._notify_reset()

    def add_reset_listener(self, listener) -> None:
        """
        Call ``listener()`` after every reset, while the store lock is held.

        Args:
            listener: Bound method; it is held weakly so its owner can be
                garbage collected
        """
        with self.lock:
            self._reset_listeners.append(weakref.WeakMethod(listener))

    def _notify_reset(self) -> None:
        live = []
        for ref in self._reset_listeners:
            listener = ref()
            if listener is not None:
                live.append(ref)
                listener()
        self._reset_listeners = live

    def save_or_rollback(self) -> None:
        """
        Commit, or abandon the pending batch if the commit fails.

        Raises:
            ValidationError: If the graph is invalid (changes are rolled back)
            CommitError: If the durable write failed (changes are rolled back)
        """
        with self.lock:
            try:
                self.save()
            except (ValidationError, CommitError):
                self.reset()
                raise


class PreferencesStore:
    """
    Key/value preferences persisted to a small JSON file.

    Every ``set`` and ``remove`` is written through immediately, under the
    store's own re-entrant lock.

    Args:
        file_path: JSON file for the preferences; None keeps them in memory
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path
        self.lock = threading.RLock()
        self._values: Dict[str, Any] = {}
        if file_path and os.path.exists(file_path):
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    values = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable preferences file %s: %s", file_path, e)
                return
            if isinstance(values, dict):
                self._values = values
            else:
                logger.warning("Ignoring preferences file %s: expected a JSON object", file_path)

    def get(self, key: str, default: Any = None) -> Any:
        with self.lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self.lock:
            self._values[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self.lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def _flush(self) -> None:
        with self.lock:
            if self.file_path:
                _write_json_atomic(self.file_path, self._values)
