"""
End-to-end store scenarios: creation, relationship, cascade delete,
persistence across reload and game reassignment.
"""
import os
import tempfile
import unittest
from datetime import date

from scoresnap.models import Game, Player, Team
from scoresnap.services import ObjectStore, all_passed, run_integration_checks


class TestIntegrationChecks(unittest.TestCase):
    """Test cases for the integration check report."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "checks.json")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_all_checks_pass(self) -> None:
        results = run_integration_checks(ObjectStore(self.path))
        names = [line.split(":")[0] for line in results]
        self.assertEqual(
            names,
            ["Creation Test", "Relationship Test", "Cascade Test", "Persistence Test", "Reassignment Test"],
        )
        self.assertTrue(all_passed(results), results)

    def test_checks_in_memory(self) -> None:
        self.assertTrue(all_passed(run_integration_checks(ObjectStore())))

    def test_all_passed(self) -> None:
        self.assertFalse(all_passed([]))
        self.assertFalse(all_passed(["Creation Test: PASS - ok", "Cascade Test: FAIL - no"]))
        self.assertTrue(all_passed(["Creation Test: PASS - ok"]))


class TestStoreScenarios(unittest.TestCase):
    """Scenario tests run directly against a file-backed store."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "data.json")
        self.store = ObjectStore(self.path)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_create_and_relate(self) -> None:
        player = self.store.new_player("Test Player", player_color="blue")
        team = self.store.new_team(player, "Test Team", team_color="red")
        self.store.new_game(
            team, opponent_name="Opponent", team_score=100, opponent_score=90,
            game_date=date.today(), location="Test Gym", notes="Test game",
        )
        self.store.save()

        fetched = self.store.fetch(Player, id=player.id)[0]
        self.assertIn(team, fetched.teams)
        self.assertTrue(fetched.teams[0].games[0].is_win)

    def test_cascade_delete(self) -> None:
        player = self.store.new_player("Test Player")
        team = self.store.new_team(player, "Test Team")
        game = self.store.new_game(team, opponent_name="Opponent", team_score=1, opponent_score=2, game_date=date.today())
        self.store.save()

        self.store.delete(player)
        self.store.save()

        self.assertEqual(self.store.fetch(Team, id=team.id), [])
        self.assertEqual(self.store.fetch(Game, id=game.id), [])
        self.assertEqual(ObjectStore(self.path).fetch(Game, id=game.id), [])

    def test_persistence_across_reload(self) -> None:
        self.store.new_player("Persistent Player", player_color="green")
        self.store.save()
        self.store.reset()
        self.assertEqual(len(self.store.fetch(Player, name="Persistent Player")), 1)

    def test_reassignment(self) -> None:
        player = self.store.new_player("Owner")
        team_a = self.store.new_team(player, "Team A")
        team_b = self.store.new_team(player, "Team B")
        games_a = [
            self.store.new_game(team_a, opponent_name=f"A{i}", team_score=i, opponent_score=0, game_date=date.today())
            for i in range(3)
        ]
        self.store.new_game(team_b, opponent_name="B0", team_score=1, opponent_score=1, game_date=date.today())
        self.store.save()

        games_a[1].set_team(team_b)
        self.store.save()

        reopened = ObjectStore(self.path)
        reloaded_a = reopened.require(Team, team_a.id)
        reloaded_b = reopened.require(Team, team_b.id)
        self.assertEqual([g.opponent_name for g in reloaded_a.ordered_games], ["A0", "A2"])
        self.assertEqual([g.opponent_name for g in reloaded_b.ordered_games], ["B0", "A1"])
        self.assertEqual([g.display_order for g in reloaded_a.ordered_games], [0, 1])
        self.assertEqual([g.display_order for g in reloaded_b.ordered_games], [0, 1])


if __name__ == "__main__":
    unittest.main()
