"""
Unit tests for AppContext selection handling.
"""
import os
import tempfile
import unittest

from scoresnap.models import Team
from scoresnap.services import AppContext, ObjectStore, PreferencesStore, RosterService, ValidationError


class TestAppContext(unittest.TestCase):
    """Test cases for the current player and team selection."""

    def setUp(self) -> None:
        self.store = ObjectStore()
        self.preferences = PreferencesStore()
        self.roster = RosterService(self.store)
        self.chris = self.roster.create_player("Chris")
        self.sam = self.roster.create_player("Sam")
        self.bears = self.roster.create_team(self.chris.id, "Bears")
        self.wildcats = self.roster.create_team(self.chris.id, "Wildcats")
        self.hawks = self.roster.create_team(self.sam.id, "Hawks")

    def make_context(self) -> AppContext:
        return AppContext(self.store, self.preferences)

    def test_defaults_to_first_player_and_team(self) -> None:
        context = self.make_context()
        self.assertIs(context.current_player, self.chris)
        self.assertIs(context.current_team, self.bears)
        self.assertFalse(context.needs_setup)

    def test_empty_store_needs_setup(self) -> None:
        context = AppContext(ObjectStore())
        self.assertIsNone(context.current_player)
        self.assertIsNone(context.current_team)
        self.assertTrue(context.needs_setup)

    def test_switch_to_player_picks_first_team(self) -> None:
        context = self.make_context()
        context.switch_to_player(self.sam)
        self.assertIs(context.current_player, self.sam)
        self.assertIs(context.current_team, self.hawks)

    def test_switch_to_team_of_other_player_is_refused(self) -> None:
        """Test that a team is only selectable under its own player."""
        context = self.make_context()
        self.assertFalse(context.switch_to_team(self.hawks))
        self.assertIs(context.current_team, self.bears)
        self.assertTrue(context.switch_to_team(self.wildcats))
        self.assertIs(context.current_team, self.wildcats)

    def test_switch_to_player_and_team(self) -> None:
        context = self.make_context()
        context.switch_to_player_and_team(self.sam, self.wildcats)
        self.assertIs(context.current_player, self.sam)
        self.assertIs(context.current_team, self.hawks)

    def test_selection_is_restored(self) -> None:
        """Test that the last viewed player and team are remembered."""
        self.make_context().switch_to_player_and_team(self.chris, self.wildcats)
        restored = self.make_context()
        self.assertIs(restored.current_player, self.chris)
        self.assertIs(restored.current_team, self.wildcats)

    def test_selection_survives_restart(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "prefs.json")
            AppContext(self.store, PreferencesStore(path)).switch_to_player(self.sam)
            restored = AppContext(self.store, PreferencesStore(path))
        self.assertIs(restored.current_player, self.sam)

    def test_stale_team_falls_back_to_first(self) -> None:
        self.make_context().switch_to_team(self.wildcats)
        self.roster.delete_team(self.wildcats.id)
        restored = self.make_context()
        self.assertIs(restored.current_team, self.bears)

    def test_player_deletion_moves_selection(self) -> None:
        context = self.make_context()
        self.roster.delete_player(self.chris.id)
        context.handle_player_deletion(self.chris)
        self.assertIs(context.current_player, self.sam)
        self.assertIs(context.current_team, self.hawks)

    def test_last_player_deletion_clears_selection(self) -> None:
        store = ObjectStore()
        roster = RosterService(store)
        player = roster.create_player("Only")
        context = AppContext(store, self.preferences)
        roster.delete_player(player.id)
        context.handle_player_deletion(player)
        self.assertTrue(context.needs_setup)
        self.assertIsNone(self.preferences.get("last_viewed_player_id"))

    def test_team_deletion_moves_selection(self) -> None:
        context = self.make_context()
        self.roster.delete_team(self.bears.id)
        context.handle_team_deletion(self.bears)
        self.assertIs(context.current_team, self.wildcats)

    def test_complete_setup(self) -> None:
        context = self.make_context()
        context.complete_setup(self.sam, self.hawks)
        self.assertIs(context.current_team, self.hawks)
        self.assertTrue(self.preferences.get("has_completed_setup"))

    def test_selection_follows_reset(self) -> None:
        """Test that a reset moves the selection onto the reloaded records."""
        context = self.make_context()
        context.switch_to_player_and_team(self.chris, self.wildcats)

        self.store.reset()

        self.assertIsNot(context.current_player, self.chris)
        self.assertEqual(context.current_player.id, self.chris.id)
        self.assertEqual(context.current_team.id, self.wildcats.id)
        reloaded_team = self.store.get(Team, self.wildcats.id)
        self.assertTrue(context.switch_to_team(reloaded_team))

    def test_selection_after_rejected_commit(self) -> None:
        context = self.make_context()
        with self.assertRaises(ValidationError):
            self.roster.create_team(self.chris.id, "  ")
        self.store.new_player("   ")
        with self.assertRaises(ValidationError):
            self.store.save_or_rollback()

        team = self.store.get(Team, self.bears.id)
        self.assertTrue(context.switch_to_team(team))

    def test_setup_completed_flag(self) -> None:
        context = self.make_context()
        self.assertFalse(context.setup_completed)
        context.complete_setup(self.chris, self.bears)
        self.assertTrue(self.make_context().setup_completed)


if __name__ == "__main__":
    unittest.main()
