"""
Unit tests for the Game model.

Tests derived results, display strings, validation, scoreboard images,
team reassignment and serialization.
"""
import unittest
from datetime import date, datetime, time
from unittest.mock import patch

from scoresnap.models import Game, Team


class TestGameResult(unittest.TestCase):
    """Test cases for results derived from the scores."""

    def test_exactly_one_result_flag(self) -> None:
        """Test that exactly one flag is set and it matches the score sign."""
        for team_score in range(0, 6):
            for opponent_score in range(0, 6):
                game = Game(team_score=team_score, opponent_score=opponent_score)
                flags = [game.is_win, game.is_loss, game.is_tie]
                self.assertEqual(flags.count(True), 1)
                diff = team_score - opponent_score
                self.assertEqual(game.is_win, diff > 0)
                self.assertEqual(game.is_loss, diff < 0)
                self.assertEqual(game.is_tie, diff == 0)

    def test_result_codes(self) -> None:
        """Test single-letter and long result labels."""
        self.assertEqual(Game(team_score=72, opponent_score=65).game_result, "W")
        self.assertEqual(Game(team_score=60, opponent_score=65).game_result, "L")
        self.assertEqual(Game(team_score=65, opponent_score=65).game_result, "T")
        self.assertEqual(Game(team_score=60, opponent_score=65).result_text, "Loss")

    def test_display_strings(self) -> None:
        """Test score, date and summary display."""
        game = Game(opponent_name="Lakers", team_score=72, opponent_score=65, game_date=date(2025, 6, 8))
        self.assertEqual(game.score_display, "72-65")
        self.assertEqual(game.date_display, "Jun 8, 2025")
        self.assertEqual(game.summary, "Win vs Lakers (72-65)")
        self.assertEqual(Game().date_display, "No date")
        self.assertEqual(Game().summary, "Tie vs Unknown (0-0)")


class TestGameValidation(unittest.TestCase):
    """Test cases for the pre-save check."""

    def test_valid_game(self) -> None:
        game = Game(opponent_name="Lakers", team_score=0, opponent_score=0, game_date=date(2025, 1, 1))
        self.assertTrue(game.validate())

    def test_invalid_games(self) -> None:
        """Test each reason a game fails validation."""
        today = date(2025, 1, 1)
        invalid = [
            Game(opponent_name="Lakers", team_score=1, opponent_score=1, game_date=None),
            Game(opponent_name=None, team_score=1, opponent_score=1, game_date=today),
            Game(opponent_name="Lakers", team_score=-1, opponent_score=1, game_date=today),
            Game(opponent_name="Lakers", team_score=1, opponent_score=-3, game_date=today),
        ]
        for game in invalid:
            self.assertFalse(game.validate())


class TestScoreboardImage(unittest.TestCase):
    """Test cases for scoreboard image changes."""

    def test_set_image_touches_timestamp(self) -> None:
        game = Game()
        stamp = datetime(2025, 6, 18, 20, 15)
        with patch("scoresnap.models.game.now", return_value=stamp):
            game.set_scoreboard_image(b"\x89PNG")
        self.assertEqual(game.scoreboard_image, b"\x89PNG")
        self.assertEqual(game.last_modified, stamp)

    def test_clear_image_touches_timestamp(self) -> None:
        game = Game(scoreboard_image=b"jpeg", last_modified=datetime(2025, 1, 1))
        stamp = datetime(2025, 6, 18, 21, 0)
        with patch("scoresnap.models.game.now", return_value=stamp):
            game.clear_scoreboard_image()
        self.assertIsNone(game.scoreboard_image)
        self.assertEqual(game.last_modified, stamp)


class TestSetTeam(unittest.TestCase):
    """Test cases for moving games between teams."""

    def setUp(self) -> None:
        self.team_a = Team(name="A")
        self.team_b = Team(name="B")
        self.games_a = [Game(opponent_name=f"A{i}") for i in range(3)]
        self.games_b = [Game(opponent_name=f"B{i}") for i in range(2)]
        for game in self.games_a:
            game.set_team(self.team_a)
        for game in self.games_b:
            game.set_team(self.team_b)

    def test_move_between_teams(self) -> None:
        """Test that the game leaves A and joins B with orders contiguous."""
        moved = self.games_a[1]
        moved.set_team(self.team_b)

        self.assertNotIn(moved, self.team_a.games)
        self.assertIn(moved, self.team_b.games)
        self.assertIs(moved.team, self.team_b)
        self.assertEqual(moved.team_id, self.team_b.id)
        self.assertEqual([g.display_order for g in self.team_a.ordered_games], [0, 1])
        self.assertEqual([g.display_order for g in self.team_b.ordered_games], [0, 1, 2])
        self.assertEqual(moved.display_order, 2)

    def test_set_same_team_is_noop(self) -> None:
        self.games_a[0].set_team(self.team_a)
        self.assertEqual(self.team_a.ordered_games, self.games_a)

    def test_set_none_detaches(self) -> None:
        game = self.games_b[0]
        game.set_team(None)
        self.assertIsNone(game.team)
        self.assertEqual(self.team_b.games, [self.games_b[1]])
        self.assertEqual(self.games_b[1].display_order, 0)


class TestGameSerialization(unittest.TestCase):
    """Test cases for dictionary conversion."""

    def test_round_trip(self) -> None:
        game = Game(
            opponent_name="Lakers",
            team_score=72,
            opponent_score=65,
            game_date=date(2025, 6, 18),
            game_time=time(19, 30),
            location="Main Gym",
            notes="Close one",
            scoreboard_image=b"\x00\x01binary",
            last_modified=datetime(2025, 6, 18, 22, 0),
        )
        data = game.to_dict()
        self.assertNotIn("is_win", data)

        restored = Game.from_dict(data)
        self.assertEqual(restored.id, game.id)
        self.assertEqual(restored.to_dict(), data)
        self.assertEqual(restored.scoreboard_image, b"\x00\x01binary")

    def test_legacy_result_flags_are_ignored(self) -> None:
        """Test that stored flags never override the scores."""
        data = {
            "opponent_name": "Lakers",
            "team_score": 50,
            "opponent_score": 70,
            "is_win": True,
            "is_tie": False,
        }
        with self.assertLogs("scoresnap.models.game", level="WARNING"):
            game = Game.from_dict(data)
        self.assertTrue(game.is_loss)
        self.assertFalse(game.is_win)


if __name__ == "__main__":
    unittest.main()
