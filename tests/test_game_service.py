"""
Unit tests for GameService functionality.

Tests recording, editing, moving and deleting games, scoreboard images and
team summaries.
"""
import unittest
from datetime import date, datetime, time
from unittest.mock import patch

from scoresnap.models import Game
from scoresnap.services import (
    GameService, ObjectStore, RecordNotFoundError, RosterService, ValidationError,
)


class TestGameService(unittest.TestCase):
    """Test cases for GameService functionality."""

    def setUp(self) -> None:
        """Set up a player with two teams."""
        self.store = ObjectStore()
        roster = RosterService(self.store)
        self.player = roster.create_player("Chris")
        self.team_a = roster.create_team(self.player.id, "Team A")
        self.team_b = roster.create_team(self.player.id, "Team B")
        self.service = GameService(self.store)

    def record(self, team=None, **kwargs) -> Game:
        fields = {
            "opponent_name": "Lakers",
            "team_score": 72,
            "opponent_score": 65,
            "game_date": date(2025, 6, 18),
        }
        fields.update(kwargs)
        return self.service.record_game((team or self.team_a).id, **fields)

    def test_record_game(self) -> None:
        """Test that a recorded game is saved under its team."""
        game = self.record(opponent_name="  Lakers ", location=" ", notes="Good game")
        self.assertEqual(game.opponent_name, "Lakers")
        self.assertIsNone(game.location)
        self.assertEqual(game.notes, "Good game")
        self.assertIs(game.team, self.team_a)
        self.assertTrue(game.is_win)
        self.assertFalse(self.store.has_changes)

    def test_record_game_defaults_to_now(self) -> None:
        stamp = datetime(2025, 6, 20, 18, 45, 12, 999)
        with patch("scoresnap.services.game_service.now", return_value=stamp):
            game = self.service.record_game(self.team_a.id, "Lakers", 10, 12)
        self.assertEqual(game.game_date, date(2025, 6, 20))
        self.assertEqual(game.game_time, time(18, 45, 12))

    def test_validate_game_data(self) -> None:
        """Test the score and opponent rules."""
        today = date(2025, 6, 18)
        self.assertEqual(self.service.validate_game_data("Lakers", 0, 200, today), [])
        self.assertEqual(self.service.validate_game_data("A" * 50, 0, 0, today), [])
        self.assertTrue(self.service.validate_game_data("A" * 51, 0, 0, today))
        self.assertTrue(self.service.validate_game_data("\n\t", 0, 0, today))
        self.assertTrue(self.service.validate_game_data("Lakers", -1, 0, today))
        self.assertTrue(self.service.validate_game_data("Lakers", 0, 201, today))
        self.assertTrue(self.service.validate_game_data("Lakers", "72", 0, today))
        self.assertTrue(self.service.validate_game_data("Lakers", 1, 0, None))

    def test_record_invalid_game_changes_nothing(self) -> None:
        with self.assertRaises(ValidationError):
            self.record(team_score=-5)
        self.assertEqual(self.team_a.games, [])
        self.assertFalse(self.store.has_changes)

    def test_record_game_unknown_team(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            self.service.record_game("00000000-0000-0000-0000-000000000000", "Lakers", 1, 0)

    def test_update_game(self) -> None:
        """Test editing scores recomputes the result."""
        game = self.record()
        updated = self.service.update_game(game.id, team_score=60, notes="Comeback fell short")
        self.assertTrue(updated.is_loss)
        self.assertEqual(updated.game_result, "L")
        self.assertEqual(updated.notes, "Comeback fell short")

    def test_update_game_rejects_bad_data(self) -> None:
        game = self.record()
        with self.assertRaises(ValidationError):
            self.service.update_game(game.id, opponent_score=999)
        with self.assertRaises(ValidationError):
            self.service.update_game(game.id, is_win=True)
        self.assertEqual(game.opponent_score, 65)

    def test_move_game(self) -> None:
        """Test moving a game keeps both teams' orders contiguous."""
        games_a = [self.record(opponent_name=f"A{i}") for i in range(3)]
        self.record(team=self.team_b, opponent_name="B0")

        moved = self.service.move_game(games_a[0].id, self.team_b.id)

        self.assertIs(moved.team, self.team_b)
        self.assertNotIn(moved, self.team_a.games)
        self.assertIn(moved, self.team_b.games)
        self.assertEqual([g.display_order for g in self.team_a.ordered_games], [0, 1])
        self.assertEqual([g.display_order for g in self.team_b.ordered_games], [0, 1])
        self.assertFalse(self.store.has_changes)

    def test_delete_game(self) -> None:
        first = self.record(opponent_name="First")
        second = self.record(opponent_name="Second")
        self.service.delete_game(first.id)
        self.assertEqual(self.team_a.games, [second])
        self.assertEqual(second.display_order, 0)

    def test_scoreboard_image(self) -> None:
        """Test attaching and clearing a scoreboard image."""
        game = self.record()
        first_stamp = datetime(2025, 6, 18, 22, 0)
        with patch("scoresnap.models.game.now", return_value=first_stamp):
            self.service.attach_scoreboard(game.id, b"\x89PNG data")
        self.assertEqual(game.scoreboard_image, b"\x89PNG data")
        self.assertEqual(game.last_modified, first_stamp)

        second_stamp = datetime(2025, 6, 18, 22, 5)
        with patch("scoresnap.models.game.now", return_value=second_stamp):
            self.service.clear_scoreboard(game.id)
        self.assertIsNone(game.scoreboard_image)
        self.assertEqual(game.last_modified, second_stamp)

        with self.assertRaises(ValidationError):
            self.service.attach_scoreboard(game.id, b"")

    def test_team_summary(self) -> None:
        """Test the summary of a team's record."""
        self.record(team_score=72, opponent_score=65, game_date=date(2025, 6, 1))
        self.record(team_score=50, opponent_score=61, game_date=date(2025, 6, 8))
        self.record(team_score=40, opponent_score=40, game_date=date(2025, 6, 15))

        summary = self.service.team_summary(self.team_a.id)

        self.assertEqual(summary["record"], "1-1-1")
        self.assertEqual(summary["games_played"], 3)
        self.assertEqual(summary["average_score"], 54.0)
        self.assertEqual(summary["point_differential"], 7 - 11)
        self.assertEqual([g["result"] for g in summary["recent_games"]], ["T", "L", "W"])
        self.assertNotIn("scoreboard_image", summary["recent_games"][0])


if __name__ == "__main__":
    unittest.main()
