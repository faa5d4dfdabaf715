"""
Store integration checks for the ScoreSnap scorebook application.

Runs the create / relate / cascade-delete / reload / reassign scenarios against
a store and reports one PASS or FAIL line per check. The checks write to the
store they are given, so point them at a scratch store.
"""
import logging
from datetime import date
from typing import List

from ..models import Game, Player, Team
from ..utils import now
from .persistence_service import CommitError, ObjectStore
from .validation import ValidationError

logger = logging.getLogger(__name__)


def _contiguous(records) -> bool:
    return [r.display_order for r in records] == list(range(len(records)))


def run_integration_checks(store: ObjectStore) -> List[str]:
    """
    Exercise the store end to end.

    Args:
        store: Store to run against; it is modified and committed

    Returns:
        Report lines, each starting with the check name and PASS or FAIL
    """
    results: List[str] = []

    # 1. Creation
    player = store.new_player("Test Player", player_color="blue")
    team = store.new_team(player, "Test Team", team_color="red")
    game = store.new_game(
        team,
        opponent_name="Opponent",
        team_score=100,
        opponent_score=90,
        game_date=date.today(),
        game_time=now().time().replace(microsecond=0),
        location="Test Gym",
        notes="Test game",
    )
    try:
        store.save()
        results.append("Creation Test: PASS - Created Player, Team, Game")
    except (ValidationError, CommitError) as e:
        results.append(f"Creation Test: FAIL - {e}")
        return results

    # 2. Relationship
    fetched = store.fetch(Player, id=player.id)
    if fetched and any(t.id == team.id for t in fetched[0].teams):
        results.append("Relationship Test: PASS - Player teams contain created team")
    else:
        results.append("Relationship Test: FAIL - Player teams do not contain created team")

    # 3. Cascade delete
    team_id, game_id = team.id, game.id
    store.delete(player)
    try:
        store.save()
    except (ValidationError, CommitError) as e:
        results.append(f"Cascade Test: FAIL - Could not delete player: {e}")
        return results
    if not store.fetch(Team, id=team_id) and not store.fetch(Game, id=game_id):
        results.append("Cascade Test: PASS - Deleting player deleted team and game")
    else:
        results.append("Cascade Test: FAIL - Team or Game still exists after deleting player")

    # 4. Persistence across reload
    store.new_player("Persistent Player", player_color="green")
    try:
        store.save()
    except (ValidationError, CommitError) as e:
        results.append(f"Persistence Test: FAIL - Could not save persistent player: {e}")
        return results
    store.reset()
    if store.fetch(Player, name="Persistent Player"):
        results.append("Persistence Test: PASS - Data survives reload")
    else:
        results.append("Persistence Test: FAIL - Data did not survive reload")

    # 5. Reassignment
    owner = store.fetch(Player, name="Persistent Player")[0]
    team_a = store.new_team(owner, "Team A")
    team_b = store.new_team(owner, "Team B")
    first = store.new_game(team_a, opponent_name="One", team_score=50, opponent_score=40, game_date=date.today())
    moved = store.new_game(team_a, opponent_name="Two", team_score=30, opponent_score=30, game_date=date.today())
    store.new_game(team_a, opponent_name="Three", team_score=20, opponent_score=60, game_date=date.today())
    store.new_game(team_b, opponent_name="Four", team_score=70, opponent_score=65, game_date=date.today())
    moved.set_team(team_b)
    if (
        moved not in team_a.games
        and moved in team_b.games
        and first in team_a.games
        and _contiguous(team_a.ordered_games)
        and _contiguous(team_b.ordered_games)
    ):
        results.append("Reassignment Test: PASS - Game moved between teams, orders contiguous")
    else:
        results.append("Reassignment Test: FAIL - Game membership or order inconsistent after move")
    try:
        store.save()
    except (ValidationError, CommitError) as e:
        results.append(f"Reassignment Test: FAIL - Could not save reassignment: {e}")

    failed = sum(1 for line in results if ": FAIL" in line)
    logger.info("Integration checks finished: %d run, %d failed", len(results), failed)
    return results


def all_passed(results: List[str]) -> bool:
    return bool(results) and all(": PASS" in line for line in results)
