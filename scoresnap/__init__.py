"""
ScoreSnap Scorebook

Tracks players, the teams they play on and the games each team plays,
with win/loss/tie records and scoreboard photos.

This package provides the data model, a JSON-backed object store, the
services built on it and a Flask JSON API.
"""
from .models import Player, Team, Game
from .services import ObjectStore, RosterService, GameService, AppContext, ServiceFactory
from .ui import create_app, run_web_app
from .utils import APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "Team", "Game", "ObjectStore", "RosterService", "GameService",
    "AppContext", "ServiceFactory", "create_app", "run_web_app", "APP_TITLE"
]
