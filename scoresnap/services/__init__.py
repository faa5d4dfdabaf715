"""
Services package for the ScoreSnap scorebook.

This package contains the object store and the service classes that handle business logic.
"""
from .persistence_service import (
    ObjectStore, PreferencesStore, CommitError, StoreLoadError, RecordNotFoundError
)
from .validation import ValidationError, DuplicateNameError
from .roster_service import RosterService
from .game_service import GameService, game_view
from .app_context import AppContext
from .integration_checks import run_integration_checks, all_passed
from .service_factory import ServiceFactory

__all__ = [
    "ObjectStore", "PreferencesStore", "CommitError", "StoreLoadError",
    "RecordNotFoundError", "ValidationError", "DuplicateNameError",
    "RosterService", "GameService", "game_view", "AppContext",
    "run_integration_checks", "all_passed", "ServiceFactory"
]
