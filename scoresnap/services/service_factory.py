"""
Service Factory for dependency injection.

This module builds the store-backed services. One factory shares one object
store and one preferences store between every service it creates, so they
all see the same graph.
"""
from typing import Optional

from .app_context import AppContext
from .game_service import GameService
from .persistence_service import ObjectStore, PreferencesStore
from .roster_service import RosterService


class ServiceFactory:
    """
    Factory for creating service instances with their store injected.

    Args:
        data_path: JSON file for the object store (None keeps it in memory)
        preferences_path: JSON file for preferences (None keeps them in memory)
    """

    def __init__(self, data_path: Optional[str] = None, preferences_path: Optional[str] = None):
        self.data_path = data_path
        self.preferences_path = preferences_path
        self._store: Optional[ObjectStore] = None
        self._preferences: Optional[PreferencesStore] = None

    def create_roster_service(self) -> RosterService:
        return RosterService(self.get_store())

    def create_game_service(self) -> GameService:
        return GameService(self.get_store())

    def create_app_context(self) -> AppContext:
        return AppContext(self.get_store(), self.get_preferences())

    def create_complete_service_suite(self) -> dict:
        """
        Create a complete suite of services sharing one store.

        Returns:
            Dictionary containing all configured services
        """
        return {
            'store': self.get_store(),
            'roster': self.create_roster_service(),
            'games': self.create_game_service(),
            'context': self.create_app_context(),
        }

    def get_store(self) -> ObjectStore:
        """Get the shared object store, opening it on first use."""
        if self._store is None:
            self._store = ObjectStore(self.data_path)
        return self._store

    def get_preferences(self) -> PreferencesStore:
        if self._preferences is None:
            self._preferences = PreferencesStore(self.preferences_path)
        return self._preferences
